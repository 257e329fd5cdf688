"""Subprocess execution for the docker binary."""

import asyncio
import codecs
import os
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

import structlog

from ..models import InvocationResult
from ..utils.logging import get_echo_logger

logger = structlog.get_logger(__name__)

STDOUT = "stdout"
STDERR = "stderr"

EchoCallback = Callable[[str, str], None]


class ProcessEnvironment:
    """Environment baseline for docker invocations.

    The baseline is fixed when the environment is built; ``merged`` returns a
    fresh mapping per call, so per-call overrides never leak into it.
    """

    def __init__(self, baseline: Optional[Mapping[str, str]] = None):
        self._baseline = dict(baseline or {})

    @classmethod
    def from_host(
        cls,
        names: Iterable[str] = ("HOME", "PATH"),
        overrides: Optional[Mapping[str, str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ProcessEnvironment":
        """Copy the named variables from the host, then apply client overrides."""
        environ = os.environ if environ is None else environ
        baseline = {name: environ[name] for name in names if name in environ}
        baseline.update(overrides or {})
        return cls(baseline)

    @property
    def baseline(self) -> Mapping[str, str]:
        return MappingProxyType(self._baseline)

    def merged(self, overrides: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        env = dict(self._baseline)
        if overrides:
            env.update(overrides)
        return env


class OutputCapture:
    """Accumulates stdout, stderr and their arrival-ordered combination.

    Each stream gets its own incremental UTF-8 decoder so a multi-byte
    character split across two reads is decoded once both halves are in.
    """

    def __init__(self, echo: Optional[EchoCallback] = None):
        self._echo = echo
        self._decoders = {
            STDOUT: codecs.getincrementaldecoder("utf-8")(errors="replace"),
            STDERR: codecs.getincrementaldecoder("utf-8")(errors="replace"),
        }
        self._streams: dict[str, List[str]] = {STDOUT: [], STDERR: []}
        self._combined: List[str] = []

    def feed(self, stream: str, chunk: bytes, final: bool = False) -> None:
        text = self._decoders[stream].decode(chunk, final=final)
        if not text:
            return
        if self._echo is not None:
            self._echo(stream, text)
        self._streams[stream].append(text)
        self._combined.append(text)

    def finish(self) -> None:
        """Flush bytes still held by the decoders."""
        for stream in (STDOUT, STDERR):
            self.feed(stream, b"", final=True)

    @property
    def stdout(self) -> str:
        return "".join(self._streams[STDOUT])

    @property
    def stderr(self) -> str:
        return "".join(self._streams[STDERR])

    @property
    def output(self) -> str:
        return "".join(self._combined)


class ProcessExecutor:
    """Runs the docker binary and captures what it prints.

    Never raises for command-level failure: a missing binary, a non-zero exit
    or a signal all come back as ``InvocationResult(ok=False, ...)``.
    """

    def __init__(
        self,
        binary: str = "docker",
        environment: Optional[ProcessEnvironment] = None,
        echo: bool = False,
        chunk_size: int = 4096,
    ):
        self.binary = binary
        self.environment = environment or ProcessEnvironment.from_host()
        self.echo = echo
        self.chunk_size = chunk_size

    async def execute(
        self,
        args: Sequence[str],
        *,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        stdin: Optional[str | bytes] = None,
    ) -> InvocationResult:
        """Run ``<binary> *args`` and wait for it to finish."""
        args = tuple(args)
        capture = OutputCapture(echo=self._echo_chunk if self.echo else None)

        logger.debug("Running docker command", binary=self.binary, args=list(args), cwd=cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=self.environment.merged(env),
            )
        except OSError as e:
            logger.warning("Failed to start docker command", binary=self.binary, args=list(args), error=str(e))
            return InvocationResult.spawn_failure(args, f"Failed to start {self.binary}: {e}")

        tasks = [
            self._pump(proc.stdout, STDOUT, capture),
            self._pump(proc.stderr, STDERR, capture),
        ]
        if stdin is not None:
            tasks.append(self._write_stdin(proc, stdin))

        # Both streams must reach EOF and the process must exit before resolving
        await asyncio.gather(*tasks)
        exit_code = await proc.wait()
        capture.finish()

        logger.debug("Docker command finished", args=list(args), exit_code=exit_code)
        return InvocationResult(
            ok=exit_code == 0,
            output=capture.output,
            stdout=capture.stdout,
            stderr=capture.stderr,
            exit_code=exit_code,
            args=args,
        )

    async def _pump(self, reader: asyncio.StreamReader, stream: str, capture: OutputCapture) -> None:
        while True:
            chunk = await reader.read(self.chunk_size)
            if not chunk:
                break
            capture.feed(stream, chunk)

    async def _write_stdin(self, proc: asyncio.subprocess.Process, payload: str | bytes) -> None:
        data = payload.encode("utf-8") if isinstance(payload, str) else payload
        try:
            proc.stdin.write(data)
            await proc.stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            # Child exited without reading its input
            logger.debug("Docker command closed stdin early", binary=self.binary)
        finally:
            proc.stdin.close()

    def _echo_chunk(self, stream: str, text: str) -> None:
        get_echo_logger().info("docker output", stream=stream, text=text)
