"""dockercli - an asyncio facade over the docker command-line tool."""

from ._version import __version__
from .models import (
    BuildOptions,
    CommandResult,
    Container,
    DockerCLIException,
    Image,
    InspectError,
    InvocationResult,
    ListOptions,
    LoginOptions,
    OutputFormat,
    OutputParseError,
    PreconditionError,
    RunOptions,
    SearchOptions,
)
from .services import Docker, DockerInstallation, detect_docker

__all__ = [
    "__version__",
    "Docker",
    "DockerInstallation",
    "detect_docker",
    "Container",
    "Image",
    "InvocationResult",
    "CommandResult",
    "ListOptions",
    "SearchOptions",
    "BuildOptions",
    "RunOptions",
    "LoginOptions",
    "OutputFormat",
    "DockerCLIException",
    "PreconditionError",
    "OutputParseError",
    "InspectError",
]
