"""Data models for dockercli."""

from .errors import (
    ErrorType,
    DockerCLIException,
    PreconditionError,
    OutputParseError,
    InspectError,
)
from .results import InvocationResult, CommandResult
from .entities import Container, Image, UNKNOWN_STATE
from .options import (
    OutputFormat,
    ListOptions,
    SearchOptions,
    BuildOptions,
    RunOptions,
    LoginOptions,
)

__all__ = [
    # Error models
    "ErrorType",
    "DockerCLIException",
    "PreconditionError",
    "OutputParseError",
    "InspectError",
    # Results
    "InvocationResult",
    "CommandResult",
    # Entities
    "Container",
    "Image",
    "UNKNOWN_STATE",
    # Options
    "OutputFormat",
    "ListOptions",
    "SearchOptions",
    "BuildOptions",
    "RunOptions",
    "LoginOptions",
]
