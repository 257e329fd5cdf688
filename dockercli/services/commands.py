"""Argument vectors for docker subcommands.

Each builder returns the arguments that follow the binary name. Values are
always separate vector entries; nothing here is ever passed through a shell.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

import structlog

from ..models import (
    BuildOptions,
    ListOptions,
    LoginOptions,
    OutputFormat,
    PreconditionError,
    RunOptions,
    SearchOptions,
)

logger = structlog.get_logger(__name__)

JSON_FORMAT = "{{json .}}"
HELLO_IMAGE = "hello-world"


def _listing_args(verb: str, options: ListOptions) -> List[str]:
    args = [verb, "--no-trunc"]
    if options.all:
        args.append("--all")
    if options.output == OutputFormat.JSON:
        args.extend(["--format", JSON_FORMAT])
    # Caller flags go last so last-flag-wins tools see them after ours
    args.extend(options.flags)
    return args


def ps_args(options: Optional[ListOptions] = None) -> List[str]:
    return _listing_args("ps", options or ListOptions())


def images_args(options: Optional[ListOptions] = None) -> List[str]:
    return _listing_args("images", options or ListOptions())


def search_args(term: str, options: Optional[SearchOptions] = None) -> List[str]:
    options = options or SearchOptions()
    if not term or not term.strip():
        raise PreconditionError("search requires a term")
    args = ["search", "--no-trunc", "--format", JSON_FORMAT]
    if options.limit is not None:
        args.extend(["--limit", str(options.limit)])
    args.extend(options.flags)
    # End of options, so a term like "-foo" is never read as a flag
    args.extend(["--", term])
    return args


def build_args(options: BuildOptions, id_file: Optional[str] = None) -> List[str]:
    """Arguments for ``docker build``.

    The context is always ``.``; the build directory is handed to the
    executor as the working directory instead.
    """
    args = ["build"]
    if options.tag:
        args.extend(["-t", options.tag])
    args.extend(["-f", options.dockerfile])
    for key, value in options.build_args.items():
        args.extend(["--build-arg", f"{key}={value}"])
    if id_file is not None:
        args.extend(["--iidfile", id_file])
    args.extend(options.flags)
    args.append(".")
    return args


def run_args(options: RunOptions) -> List[str]:
    if not options.image or not options.image.strip():
        raise PreconditionError("run requires an image")
    # No image reference starts with "-"; docker would parse it as a flag
    if options.image.startswith("-"):
        raise PreconditionError(f"Invalid image reference: {options.image!r}")
    args = ["run"]
    if options.detach:
        args.extend(["--detach", "--rm"])
    args.extend(options.flags)
    args.append(options.image)
    args.extend(options.command)
    return args


def hello_args() -> List[str]:
    return ["run", HELLO_IMAGE]


def kill_args(container_id: str, signal: Optional[str] = None) -> List[str]:
    if not container_id:
        raise PreconditionError("kill requires a container id")
    args = ["kill"]
    if signal:
        args.extend(["--signal", signal])
    args.append(container_id)
    return args


def inspect_args(name_or_id: str, kind: Optional[str] = None) -> List[str]:
    if not name_or_id:
        raise PreconditionError("inspect requires a name or id")
    args = ["inspect"]
    if kind:
        args.extend(["--type", kind])
    args.append(name_or_id)
    return args


def info_args() -> List[str]:
    return ["info", "--format", JSON_FORMAT]


def version_args() -> List[str]:
    return ["version", "--format", JSON_FORMAT]


def login_args(options: LoginOptions) -> Tuple[List[str], str]:
    """Arguments and stdin payload for ``docker login``.

    The password is returned as the stdin payload. Argument vectors are
    visible to every process on the host, so it never goes in there.
    """
    if not options.username:
        raise PreconditionError("login requires a username")
    if options.password is None:
        raise PreconditionError("login requires a password")
    args = ["login", "--username", options.username, "--password-stdin"]
    if options.server:
        args.append(options.server)
    return args, options.password.get_secret_value()


def logout_args(server: Optional[str] = None) -> List[str]:
    args = ["logout"]
    if server:
        args.append(server)
    return args


class IdFile:
    """Temporary file docker writes a result id into (``--iidfile``).

    Used as an async context manager: entering allocates a unique path,
    leaving removes the file whether or not the build succeeded.
    """

    def __init__(self, directory: Optional[str] = None, prefix: str = "dockercli-", suffix: str = ".id"):
        self.directory = directory
        self.prefix = prefix
        self.suffix = suffix
        self.path: Optional[str] = None

    async def __aenter__(self) -> "IdFile":
        fd, self.path = tempfile.mkstemp(prefix=self.prefix, suffix=self.suffix, dir=self.directory)
        os.close(fd)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def read_id(self) -> Optional[str]:
        """Return the id docker wrote, or None if nothing was written."""
        if self.path is None:
            return None
        path = Path(self.path)
        if not path.exists():
            return None
        content = path.read_text(encoding="utf-8").strip()
        return content or None

    def cleanup(self) -> None:
        if self.path is None:
            return
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove id file", path=self.path, error=str(e))
