"""Locate the docker binary and read its version banner."""

import re
import shutil
from dataclasses import dataclass
from typing import Optional

import structlog

from .process import ProcessExecutor

logger = structlog.get_logger(__name__)

# "Docker version 24.0.5, build ced0996"
_VERSION_PATTERN = re.compile(r"version\s+(?P<version>[^\s,]+)", re.IGNORECASE)


@dataclass(frozen=True)
class DockerInstallation:
    """Where the binary lives and which version it reports."""

    path: str
    version: str | None


def parse_version_banner(banner: str) -> Optional[str]:
    match = _VERSION_PATTERN.search(banner or "")
    return match.group("version") if match else None


async def detect_docker(
    binary: str = "docker",
    executor: Optional[ProcessExecutor] = None,
) -> Optional[DockerInstallation]:
    """Return the installation, or None when the binary is not on PATH."""
    path = shutil.which(binary)
    if path is None:
        logger.info("Docker binary not found", binary=binary)
        return None

    executor = executor or ProcessExecutor(binary=path)
    result = await executor.execute(["--version"])
    version = parse_version_banner(result.stdout) if result.ok else None
    if version is None:
        logger.warning("Could not read docker version", path=path, output=result.output.strip())
    return DockerInstallation(path=path, version=version)
