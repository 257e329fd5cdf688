"""Parsers for the text docker prints.

Two row formats exist: the human table docker prints by default, and the
JSON-Lines stream it prints for ``--format '{{json .}}'``. Whole-document JSON
(``inspect``, ``info``, ``version``) gets its own helper. All functions here
are pure.
"""

import json
import re
from typing import Any, Iterable, List, Optional, Sequence

from ..models import OutputParseError

# Header labels are separated by two or more spaces; a label may contain one
_HEADER_LABEL = re.compile(r"\S+(?: \S+)*")

# Only \n (and \r\n) end a line; U+2028 and friends may sit unescaped inside JSON strings
_LINE_BREAK = re.compile(r"\r?\n")


def column_key(label: str) -> str:
    """``CONTAINER ID`` -> ``container_id``."""
    return label.strip().lower().replace(" ", "_")


def _split_lines(lines: str | Iterable[str]) -> List[str]:
    if isinstance(lines, str):
        return _LINE_BREAK.split(lines)
    return [line.rstrip("\r\n") for line in lines]


def parse_table(
    lines: str | Iterable[str],
    expected_columns: Optional[Sequence[str]] = None,
) -> List[dict[str, str]]:
    """Parse a column-aligned table with a header row.

    Column boundaries are the start offsets of the header labels; every value
    is the stripped slice between two boundaries, the last column running to
    the end of the line.

    Args:
        lines: Raw stdout, or its lines
        expected_columns: Keys (``container_id``, ``image``...) the header must have

    Returns:
        One mapping per data row; an empty list for a header with no rows

    Raises:
        OutputParseError: No header line, or a header missing expected columns
    """
    rows = [line for line in _split_lines(lines) if line.strip()]
    if not rows:
        raise OutputParseError("Empty table output")

    header, body = rows[0], rows[1:]
    columns = [(match.start(), column_key(match.group())) for match in _HEADER_LABEL.finditer(header)]
    if not columns:
        raise OutputParseError("Table header has no columns", line=1)

    if expected_columns:
        keys = {key for _, key in columns}
        missing = [column for column in expected_columns if column not in keys]
        if missing:
            raise OutputParseError(f"Table header is missing columns {missing}", line=1)

    parsed = []
    for line in body:
        row = {}
        for index, (start, key) in enumerate(columns):
            end = columns[index + 1][0] if index + 1 < len(columns) else None
            row[key] = line[start:end].strip()
        parsed.append(row)
    return parsed


def parse_json_lines(text: str) -> List[Any]:
    """Parse one JSON document per non-blank line.

    Raises:
        OutputParseError: Any line is not valid JSON; nothing partial is returned
    """
    values = []
    for number, line in enumerate(_LINE_BREAK.split(text), start=1):
        if not line.strip():
            continue
        try:
            values.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise OutputParseError(f"Malformed JSON: {e.msg}", line=number) from e
    return values


def parse_json_document(text: str) -> Any:
    """Parse the whole of ``text`` as one JSON document."""
    if not text.strip():
        raise OutputParseError("Empty JSON output")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise OutputParseError(f"Malformed JSON: {e.msg}", line=e.lineno) from e
