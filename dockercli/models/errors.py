"""Error models and exception classes for dockercli.

Only caller mistakes (``PreconditionError``) escape the public operations.
Spawn failures and non-zero exits are ordinary ``ok=False`` results, parse
failures are reported through ``CommandResult.parse_error`` and inspect
failures are recovered by the entity reifier.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """Error type enumeration."""

    PRECONDITION = "precondition"
    PARSE = "parse"
    SPAWN = "spawn"
    COMMAND_FAILED = "command_failed"
    ENRICHMENT = "enrichment"


class DockerCLIException(Exception):
    """Base exception for dockercli."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.COMMAND_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        super().__init__(message)


class PreconditionError(DockerCLIException, ValueError):
    """A required value was not supplied by the caller."""

    def __init__(self, message: str = "Precondition failed", **kwargs):
        super().__init__(message=message, error_type=ErrorType.PRECONDITION, **kwargs)


class OutputParseError(DockerCLIException):
    """Captured output did not have the expected table or JSON shape."""

    def __init__(self, message: str = "Could not parse command output", line: int | None = None, **kwargs):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message=message, error_type=ErrorType.PARSE, **kwargs)


class InspectError(DockerCLIException):
    """An inspect query failed or returned an unusable document."""

    def __init__(self, target: str, message: str = None, **kwargs):
        self.target = target
        error_message = message or f"Inspect failed for {target}"
        super().__init__(message=error_message, error_type=ErrorType.ENRICHMENT, **kwargs)
