"""Unit tests for the table, JSON-Lines and JSON document parsers."""

import json

import pytest

from dockercli.models import OutputParseError
from dockercli.services.parsers import (
    column_key,
    parse_json_document,
    parse_json_lines,
    parse_table,
)


def render_table(header, rows):
    """Lay rows out the way docker's tabwriter does (three-space gutter)."""
    widths = [max(len(line[index]) for line in [header, *rows]) for index in range(len(header))]
    lines = []
    for line in [header, *rows]:
        cells = [cell.ljust(width + 3) for cell, width in zip(line[:-1], widths)]
        lines.append("".join(cells) + line[-1])
    return "\n".join(lines) + "\n"


PS_TABLE = render_table(
    ["CONTAINER ID", "IMAGE", "COMMAND", "CREATED", "STATUS", "PORTS", "NAMES"],
    [
        [
            "4c01db0b339c7f2a8e8b3f5ad2b1e0c7f8e9d6a5b4c3d2e1f0a9b8c7d6e5f4a3",
            "nginx:1.27",
            '"/docker-entrypoint.…"',
            "2 minutes ago",
            "Up 2 minutes",
            "80/tcp",
            "web",
        ],
        [
            "91e2aa43bd0f6c51e2d9c8a7b6f5e4d3c2b1a0f9e8d7c6b5a4f3e2d1c0b9a8f7",
            "redis:7",
            '"docker-entrypoint.s…"',
            "3 hours ago",
            "Exited (0) 2 minutes ago",
            "",
            "cache",
        ],
    ],
)

IMAGES_TABLE = render_table(
    ["REPOSITORY", "TAG", "IMAGE ID", "CREATED", "SIZE"],
    [
        ["demo", "v1", "sha256:" + "deadbeef" * 8, "2 hours ago", "188MB"],
        ["<none>", "<none>", "sha256:" + "0123456789abcdef" * 4, "3 days ago", "72.8MB"],
    ],
)


class TestColumnKey:
    """Tests for header label normalization."""

    def test_multi_word_label(self):
        assert column_key("CONTAINER ID") == "container_id"

    def test_single_word_label(self):
        assert column_key("NAMES") == "names"


class TestParseTable:
    """Tests for the column-aligned table parser."""

    def test_ps_table_rows(self):
        """Test that each row is sliced at the header offsets."""
        rows = parse_table(PS_TABLE)

        assert len(rows) == 2
        assert rows[0]["container_id"].startswith("4c01db0b339c")
        assert rows[0]["image"] == "nginx:1.27"
        assert rows[0]["status"] == "Up 2 minutes"
        assert rows[0]["ports"] == "80/tcp"
        assert rows[0]["names"] == "web"

    def test_empty_column_is_empty_string(self):
        """Test that a blank cell comes back as an empty string."""
        rows = parse_table(PS_TABLE)

        assert rows[1]["ports"] == ""
        assert rows[1]["names"] == "cache"
        assert rows[1]["status"] == "Exited (0) 2 minutes ago"

    def test_accepts_list_of_lines(self):
        """Test that pre-split lines parse like raw text."""
        assert parse_table(PS_TABLE.splitlines()) == parse_table(PS_TABLE)

    def test_images_table(self):
        rows = parse_table(IMAGES_TABLE, expected_columns=["image_id"])

        assert [row["repository"] for row in rows] == ["demo", "<none>"]
        assert rows[0]["size"] == "188MB"
        assert rows[1]["image_id"].startswith("sha256:0123")

    def test_header_only_is_zero_rows(self):
        """Test that a header with no rows means 'nothing listed', not a failure."""
        header = PS_TABLE.splitlines()[0] + "\n"
        assert parse_table(header) == []

    def test_blank_lines_ignored(self):
        rows = parse_table("\n" + PS_TABLE + "\n\n")
        assert len(rows) == 2

    def test_crlf_line_endings(self):
        rows = parse_table(PS_TABLE.replace("\n", "\r\n"))
        assert rows[0]["names"] == "web"

    def test_unicode_line_separator_in_cell(self):
        table = render_table(["CONTAINER ID", "NAMES"], [["4c01db0b339c", "web\u2028blue"], ["91e2aa43bd0f", "cache"]])

        rows = parse_table(table)

        assert [row["names"] for row in rows] == ["web\u2028blue", "cache"]

    def test_empty_input_is_parse_failure(self):
        """Test that empty output is distinguishable from zero rows."""
        with pytest.raises(OutputParseError):
            parse_table("")

    def test_whitespace_only_is_parse_failure(self):
        with pytest.raises(OutputParseError):
            parse_table("   \n\n")

    def test_header_mismatch_is_parse_failure(self):
        """Test that a table without the expected columns is rejected."""
        with pytest.raises(OutputParseError) as exc_info:
            parse_table(IMAGES_TABLE, expected_columns=["container_id"])

        assert "container_id" in exc_info.value.message


class TestParseJsonLines:
    """Tests for the JSON-Lines parser."""

    def test_one_value_per_line_in_order(self):
        text = '{"ID": "a"}\n{"ID": "b"}\n{"ID": "c"}\n'
        assert parse_json_lines(text) == [{"ID": "a"}, {"ID": "b"}, {"ID": "c"}]

    @pytest.mark.parametrize("count", [0, 1, 5, 40])
    def test_k_lines_give_k_values(self, count):
        text = "".join(f'{{"n": {n}}}\n' for n in range(count))
        values = parse_json_lines(text)

        assert len(values) == count
        assert [value["n"] for value in values] == list(range(count))

    def test_blank_lines_skipped(self):
        assert parse_json_lines('\n{"a": 1}\n\n   \n{"a": 2}\n') == [{"a": 1}, {"a": 2}]

    def test_non_object_values_allowed(self):
        assert parse_json_lines('1\n"two"\n[3]\n') == [1, "two", [3]]

    def test_empty_text_is_empty_list(self):
        assert parse_json_lines("") == []

    def test_malformed_line_fails_whole_parse(self):
        """Test that one bad line means no partial result."""
        text = '{"ID": "a"}\n{"ID": \n{"ID": "c"}\n'
        with pytest.raises(OutputParseError) as exc_info:
            parse_json_lines(text)

        assert exc_info.value.line == 2

    @pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\u0085"])
    def test_unicode_line_separators_inside_values(self, separator):
        """Test that only newlines end a record, not Unicode line separators."""
        text = json.dumps({"Names": f"a{separator}b"}, ensure_ascii=False) + "\n" + '{"Names": "c"}\r\n'

        values = parse_json_lines(text)

        assert values == [{"Names": f"a{separator}b"}, {"Names": "c"}]

    def test_trailing_garbage_fails(self):
        with pytest.raises(OutputParseError):
            parse_json_lines('{"ID": "a"}\nWARNING: something\n')


class TestParseJsonDocument:
    """Tests for whole-document JSON parsing."""

    def test_inspect_array(self):
        assert parse_json_document('[\n  {"Id": "abc"}\n]\n') == [{"Id": "abc"}]

    def test_empty_is_parse_failure(self):
        with pytest.raises(OutputParseError):
            parse_json_document("\n")

    def test_malformed_is_parse_failure(self):
        with pytest.raises(OutputParseError):
            parse_json_document("[{")
