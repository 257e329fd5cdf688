"""Domain entities reconstituted from docker output.

Entities are immutable snapshots. A container or image keeps a reference to
the ``Docker`` facade that produced it so that ``await container.kill()``
can re-issue the facade operation with its own id; it does not own the
facade and never updates it.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from ..utils.identifiers import short_id
from .errors import PreconditionError

if TYPE_CHECKING:
    from ..services.client import Docker
    from .results import CommandResult


UNKNOWN_STATE = "unknown"


@dataclass(frozen=True)
class Container:
    """A docker container as seen by ``inspect`` or a ``ps`` listing."""

    id: str
    image_id: str | None = None
    image: str | None = None
    name: str | None = None
    created: str | None = None
    started_at: str | None = None
    state: str = UNKNOWN_STATE
    status: str | None = None
    degraded: bool = False
    client: Optional["Docker"] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.id:
            raise PreconditionError("Container requires a non-empty id")

    @property
    def short_id(self) -> str:
        return short_id(self.id)

    @property
    def running(self) -> bool:
        return self.state == "running"

    def _require_client(self) -> "Docker":
        if self.client is None:
            raise PreconditionError(f"Container {self.short_id} is not bound to a Docker client")
        return self.client

    async def kill(self, signal: str | None = None) -> "CommandResult":
        """Kill this container through the client that listed or started it."""
        return await self._require_client().kill(self.id, signal=signal)

    async def inspect(self) -> "CommandResult":
        """Fetch the full inspect document for this container."""
        return await self._require_client().inspect(self.id, kind="container")


@dataclass(frozen=True)
class Image:
    """A docker image as seen by ``inspect`` or an ``images`` listing."""

    id: str
    tags: tuple[str, ...] = ()
    created: str | None = None
    size: int | None = None
    architecture: str | None = None
    degraded: bool = False
    client: Optional["Docker"] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.id:
            raise PreconditionError("Image requires a non-empty id")

    @property
    def short_id(self) -> str:
        return short_id(self.id)

    @property
    def tag(self) -> str | None:
        """First tag, the one docker lists first."""
        return self.tags[0] if self.tags else None

    def _require_client(self) -> "Docker":
        if self.client is None:
            raise PreconditionError(f"Image {self.short_id} is not bound to a Docker client")
        return self.client

    async def inspect(self) -> "CommandResult":
        """Fetch the full inspect document for this image."""
        return await self._require_client().inspect(self.id, kind="image")

    async def run(self, **options: Any) -> "CommandResult":
        """Run a container from this image."""
        return await self._require_client().run(image=self.id, **options)
