"""Services behind the Docker facade.

- process.py: subprocess execution and output capture
- parsers.py: table, JSON-Lines and JSON document parsing
- commands.py: argument vectors and the image id side channel
- reifier.py: Container / Image construction via inspect
- client.py: the Docker facade
- detection.py: binary lookup and version banner
"""

from .client import Docker
from .detection import DockerInstallation, detect_docker
from .process import OutputCapture, ProcessEnvironment, ProcessExecutor
from .reifier import EntityReifier

__all__ = [
    "Docker",
    "DockerInstallation",
    "detect_docker",
    "OutputCapture",
    "ProcessEnvironment",
    "ProcessExecutor",
    "EntityReifier",
]
