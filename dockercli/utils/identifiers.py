"""Identifier helpers for docker object ids."""

import re

# Registered OCI digest algorithms only; "node:20" is a reference, not a digest
_DIGEST_PATTERN = re.compile(r"^sha(?:256|384|512)(?:\+[a-z0-9]+)?:(?P<encoded>[0-9a-fA-F]+)$")


def strip_digest_prefix(value: str) -> str:
    """Drop a content-hash algorithm label from an id.

    ``sha256:4f3c...`` becomes ``4f3c...``. Values without a label are
    returned unchanged, so applying this twice is the same as applying it once.
    """
    if not value:
        return value
    match = _DIGEST_PATTERN.match(value.strip())
    if match:
        return match.group("encoded")
    return value.strip()


def short_id(value: str, length: int = 12) -> str:
    """Return the abbreviated form docker prints in its tables."""
    return strip_digest_prefix(value)[:length]
