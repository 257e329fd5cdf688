"""Result models returned by the process executor and the Docker facade."""

from dataclasses import dataclass
from typing import Any, Sequence

from .errors import OutputParseError


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of one subprocess run.

    ``output`` holds stdout and stderr chunks in the order they arrived;
    ``stdout`` and ``stderr`` hold each stream on its own. ``exit_code`` is
    ``None`` when the process could not be started, and negative when it was
    terminated by a signal.
    """

    ok: bool
    output: str
    stdout: str
    stderr: str
    exit_code: int | None = None
    args: tuple[str, ...] = ()

    @classmethod
    def spawn_failure(cls, args: Sequence[str], message: str) -> "InvocationResult":
        """Build the negative result for a process that never started."""
        return cls(
            ok=False,
            output=message,
            stdout="",
            stderr=message,
            exit_code=None,
            args=tuple(args),
        )

    @property
    def started(self) -> bool:
        return self.exit_code is not None


@dataclass(frozen=True)
class CommandResult:
    """Uniform return value of every facade operation.

    Check ``ok`` before trusting ``payload``. A parse failure sets ``ok`` to
    False and fills ``parse_error``, so "nothing found" (``ok`` with an empty
    payload) is never confused with "output not understood".
    ``degraded_ids`` lists listing entries whose inspect failed and which were
    built from listing fields only.
    """

    ok: bool
    output: str
    stdout: str
    stderr: str
    exit_code: int | None = None
    payload: Any = None
    parse_error: str | None = None
    degraded_ids: tuple[str, ...] = ()

    @classmethod
    def from_invocation(cls, invocation: InvocationResult, **fields) -> "CommandResult":
        """Carry the raw invocation fields over, adding payload details."""
        return cls(
            ok=fields.pop("ok", invocation.ok),
            output=invocation.output,
            stdout=invocation.stdout,
            stderr=invocation.stderr,
            exit_code=invocation.exit_code,
            **fields,
        )

    @classmethod
    def parse_failure(cls, invocation: InvocationResult, error: OutputParseError) -> "CommandResult":
        return cls.from_invocation(invocation, ok=False, parse_error=error.message)

    @property
    def degraded(self) -> int:
        """Number of entities that could not be enriched."""
        return len(self.degraded_ids)
