"""Pytest configuration and shared fixtures."""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pytest

# Keep the host environment from leaking into Settings()
for _name in ("DOCKER_BINARY", "DOCKER_ECHO", "DOCKER_ENV_PASSTHROUGH", "DOCKER_TMP_DIR", "DOCKER_ENRICH"):
    os.environ.pop(_name, None)

from dockercli.config import Settings
from dockercli.models import InvocationResult
from dockercli.services import Docker


def invocation(
    stdout: str = "",
    stderr: str = "",
    exit_code: int | None = 0,
    args: tuple[str, ...] = (),
) -> InvocationResult:
    """Build an InvocationResult the way the executor would."""
    return InvocationResult(
        ok=exit_code == 0,
        output=stdout + stderr,
        stdout=stdout,
        stderr=stderr,
        exit_code=exit_code,
        args=args,
    )


def json_lines(*rows: Dict[str, Any]) -> str:
    return "".join(json.dumps(row) + "\n" for row in rows)


@dataclass
class Call:
    args: List[str]
    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    stdin: Optional[str] = None


@dataclass
class ScriptedExecutor:
    """In-memory stand-in for ProcessExecutor.

    Handlers are registered per docker subcommand and receive the recorded
    call; unregistered subcommands fail with exit code 1.
    """

    binary: str = "docker"
    calls: List[Call] = field(default_factory=list)
    handlers: Dict[str, Callable[[Call], InvocationResult]] = field(default_factory=dict)

    def on(self, verb: str, handler: Callable[[Call], InvocationResult] | InvocationResult) -> None:
        if isinstance(handler, InvocationResult):
            result = handler
            handler = lambda call: result  # noqa: E731
        self.handlers[verb] = handler

    def calls_for(self, verb: str) -> List[Call]:
        return [call for call in self.calls if call.args and call.args[0] == verb]

    async def execute(self, args, *, cwd=None, env=None, stdin=None) -> InvocationResult:
        call = Call(args=list(args), cwd=cwd, env=dict(env) if env else None, stdin=stdin)
        self.calls.append(call)
        handler = self.handlers.get(call.args[0])
        if handler is None:
            return invocation(stderr=f"unexpected command: {call.args}\n", exit_code=1, args=tuple(args))
        return handler(call)


@pytest.fixture
def test_settings():
    """Settings isolated from the host environment and any .env file."""
    return Settings(_env_file=None, docker_binary="docker", docker_echo=False, docker_enrich=True)


@pytest.fixture
def executor():
    return ScriptedExecutor()


@pytest.fixture
def docker(test_settings, executor):
    """Docker facade wired to the scripted executor."""
    return Docker(test_settings, executor=executor)


@pytest.fixture
def container_inspect():
    """Factory for a docker container inspect document."""

    def _make(container_id: str, name: str = "web", status: str = "running") -> Dict[str, Any]:
        return {
            "Id": container_id,
            "Name": f"/{name}",
            "Created": "2026-10-18T09:12:44.123456789Z",
            "Image": "sha256:" + "ab" * 32,
            "State": {"Status": status, "StartedAt": "2026-10-18T09:12:45.000000001Z"},
            "Config": {"Image": "nginx:1.27"},
        }

    return _make


@pytest.fixture
def image_inspect():
    """Factory for a docker image inspect document."""

    def _make(image_id: str, tags: Optional[List[str]] = None) -> Dict[str, Any]:
        return {
            "Id": f"sha256:{image_id}",
            "RepoTags": tags if tags is not None else ["demo:v1"],
            "Created": "2026-10-17T21:03:10.5Z",
            "Size": 187_654_321,
            "Architecture": "amd64",
        }

    return _make


@pytest.fixture
def make_result():
    """Factory for InvocationResult values."""
    return invocation


@pytest.fixture
def make_json_lines():
    """Render rows the way ``--format '{{json .}}'`` prints them."""
    return json_lines
