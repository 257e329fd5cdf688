"""Option models for the Docker facade operations."""

# Standard library imports
from enum import Enum
from typing import Dict, List, Optional

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field, SecretStr


class OutputFormat(str, Enum):
    """How listing commands are asked to print their rows."""

    JSON = "json"
    TABLE = "table"


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid")

    flags: List[str] = Field(
        default_factory=list, description="Extra command-line flags, appended after the built-in ones"
    )


class ListOptions(_Options):
    """Options for ``ps`` and ``images``."""

    all: bool = Field(default=False, description="Include stopped containers / intermediate images")
    output: OutputFormat = Field(default=OutputFormat.JSON, description="Row format requested from docker")
    enrich: Optional[bool] = Field(
        default=None, description="Inspect every row (None uses the configured default)"
    )


class SearchOptions(_Options):
    """Options for ``search``."""

    limit: Optional[int] = Field(default=None, ge=1, le=100)


class BuildOptions(_Options):
    """Options for ``build``."""

    tag: Optional[str] = Field(default=None, description="Name and optionally a tag, e.g. demo:v1")
    cwd: str = Field(default=".", description="Directory the build runs in; it is the build context")
    dockerfile: str = Field(default="Dockerfile", min_length=1)
    build_args: Dict[str, str] = Field(default_factory=dict)
    no_id: bool = Field(default=False, description="Skip the image id side-channel file")
    process_env: Dict[str, str] = Field(
        default_factory=dict, description="Extra environment for the docker process (e.g. DOCKER_BUILDKIT)"
    )


class RunOptions(_Options):
    """Options for ``run``.

    ``image`` is validated by the command builder so that a missing image is
    reported as a ``PreconditionError`` before any process is spawned.
    """

    image: Optional[str] = Field(default=None, description="Image reference or id")
    detach: bool = Field(default=True, description="Run in the background and remove on exit")
    command: List[str] = Field(default_factory=list, description="Command and arguments for the container")
    process_env: Dict[str, str] = Field(
        default_factory=dict, description="Extra environment for the docker process, not the container"
    )


class LoginOptions(BaseModel):
    """Options for ``login``. The password only ever travels on stdin."""

    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = None
    password: Optional[SecretStr] = None
    server: Optional[str] = None
