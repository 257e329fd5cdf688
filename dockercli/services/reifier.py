"""Turn ids and listing rows into Container and Image entities.

Every entity is enriched with a secondary ``docker inspect``. When that
fails (the container exited between ``ps`` and ``inspect``, the daemon
hiccupped, the document is unreadable) the entity is built from whatever the
listing row already had and flagged as degraded; the failure never reaches
the caller of the listing.
"""

import re
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple

import structlog

from ..models import (
    Container,
    Image,
    InspectError,
    OutputParseError,
    UNKNOWN_STATE,
)
from ..utils.identifiers import short_id, strip_digest_prefix
from .commands import inspect_args
from .parsers import parse_json_document
from .process import ProcessExecutor

if TYPE_CHECKING:
    from .client import Docker

logger = structlog.get_logger(__name__)

CONTAINER = "container"
IMAGE = "image"

NONE_VALUE = "<none>"

# docker prints sizes with decimal units (units.HumanSize)
_SIZE_PATTERN = re.compile(r"^\s*(?P<number>\d+(?:\.\d+)?)\s*(?P<unit>[kKMGTP]?B)\s*$")
_SIZE_UNITS = {"B": 1, "kB": 10**3, "KB": 10**3, "MB": 10**6, "GB": 10**9, "TB": 10**12, "PB": 10**15}

# Listing status text -> lifecycle state, for tables that have no STATE column
_STATUS_PREFIXES = (
    ("up", "running"),
    ("exited", "exited"),
    ("created", "created"),
    ("restarting", "restarting"),
    ("removal in progress", "removing"),
    ("dead", "dead"),
)


def row_value(row: Optional[Mapping[str, Any]], *keys: str) -> Optional[Any]:
    """First non-empty value among ``keys`` (JSON-Lines and table spellings)."""
    if not row:
        return None
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_size(value: Any) -> Optional[int]:
    """``13.3kB`` -> 13300. Integers pass through; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = _SIZE_PATTERN.match(value)
    if not match:
        return None
    return round(float(match.group("number")) * _SIZE_UNITS[match.group("unit")])


def state_from_status(status: Optional[str]) -> str:
    """Derive a lifecycle state from status text such as ``Up 2 hours``."""
    if not status:
        return UNKNOWN_STATE
    lowered = status.strip().lower()
    if "(paused)" in lowered:
        return "paused"
    for prefix, state in _STATUS_PREFIXES:
        if lowered.startswith(prefix):
            return state
    return UNKNOWN_STATE


class EntityReifier:
    """Builds entities from inspect documents, degrading to listing rows."""

    def __init__(self, executor: ProcessExecutor, client: Optional["Docker"] = None):
        self.executor = executor
        self.client = client

    # ------------------------------------------------------------------
    # Inspect
    # ------------------------------------------------------------------

    async def inspect_document(self, name_or_id: str, kind: Optional[str] = None) -> Dict[str, Any]:
        """Return the first (only) object of ``docker inspect``.

        Raises:
            InspectError: Non-zero exit, unreadable JSON or an unexpected shape
        """
        result = await self.executor.execute(inspect_args(name_or_id, kind))
        if not result.ok:
            raise InspectError(
                name_or_id,
                f"inspect exited with {result.exit_code}: {result.stderr.strip()}",
            )
        try:
            documents = parse_json_document(result.stdout)
        except OutputParseError as e:
            raise InspectError(name_or_id, e.message) from e
        if not isinstance(documents, list) or not documents or not isinstance(documents[0], dict):
            raise InspectError(name_or_id, "inspect returned no object")
        return documents[0]

    async def reify_container(self, container_id: str, row: Optional[Mapping[str, Any]] = None) -> Container:
        container_id = strip_digest_prefix(container_id)
        try:
            document = await self.inspect_document(container_id, CONTAINER)
            return self.container_from_inspect(document, fallback_id=container_id)
        except InspectError as e:
            logger.warning(
                "Container inspect failed, using listing fields",
                container_id=short_id(container_id),
                error=e.message,
            )
            return self.degraded_container(container_id, row)

    async def reify_image(self, image_id: str, row: Optional[Mapping[str, Any]] = None) -> Image:
        image_id = strip_digest_prefix(image_id)
        try:
            document = await self.inspect_document(image_id, IMAGE)
            return self.image_from_inspect(document, fallback_id=image_id)
        except InspectError as e:
            logger.warning(
                "Image inspect failed, using listing fields",
                image_id=short_id(image_id),
                error=e.message,
            )
            return self.degraded_image(image_id, row)

    async def reify_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        kind: str,
        enrich: bool = True,
    ) -> Tuple[List[Container | Image], List[str]]:
        """Reify listing rows one after another, keeping listing order.

        Returns the entities and the ids whose inspect failed. With
        ``enrich`` off no inspect is issued and every entity is degraded.

        Raises:
            OutputParseError: A row carries no id
        """
        entities: List[Container | Image] = []
        degraded: List[str] = []
        for index, row in enumerate(rows):
            entity_id = self.row_id(row, kind)
            if entity_id is None:
                raise OutputParseError(f"Listing row {index + 1} has no {kind} id")
            if kind == CONTAINER:
                entity = await self.reify_container(entity_id, row) if enrich else self.degraded_container(entity_id, row)
            else:
                entity = await self.reify_image(entity_id, row) if enrich else self.degraded_image(entity_id, row)
            if enrich and entity.degraded:
                degraded.append(entity.id)
            entities.append(entity)
        return entities, degraded

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def row_id(row: Mapping[str, Any], kind: str) -> Optional[str]:
        if not isinstance(row, Mapping):
            return None
        if kind == CONTAINER:
            value = row_value(row, "ID", "Id", "container_id")
        else:
            value = row_value(row, "ID", "Id", "image_id")
        if value is None:
            return None
        return strip_digest_prefix(str(value)) or None

    def container_from_inspect(self, document: Mapping[str, Any], fallback_id: str = "") -> Container:
        state = document.get("State") or {}
        config = document.get("Config") or {}
        name = document.get("Name") or None
        image_id = document.get("Image")
        return Container(
            id=strip_digest_prefix(document.get("Id") or fallback_id),
            image_id=strip_digest_prefix(image_id) if image_id else None,
            image=config.get("Image"),
            name=name.lstrip("/") if name else None,
            created=document.get("Created"),
            started_at=state.get("StartedAt"),
            state=state.get("Status") or UNKNOWN_STATE,
            status=None,
            client=self.client,
        )

    def degraded_container(self, container_id: str, row: Optional[Mapping[str, Any]] = None) -> Container:
        status = row_value(row, "Status", "status")
        state = row_value(row, "State", "state") or state_from_status(status)
        return Container(
            id=container_id,
            image=row_value(row, "Image", "image"),
            name=row_value(row, "Names", "names"),
            created=row_value(row, "CreatedAt", "created"),
            state=state,
            status=status,
            degraded=True,
            client=self.client,
        )

    def image_from_inspect(self, document: Mapping[str, Any], fallback_id: str = "") -> Image:
        return Image(
            id=strip_digest_prefix(document.get("Id") or fallback_id),
            tags=tuple(document.get("RepoTags") or ()),
            created=document.get("Created"),
            size=parse_size(document.get("Size")),
            architecture=document.get("Architecture"),
            client=self.client,
        )

    def degraded_image(self, image_id: str, row: Optional[Mapping[str, Any]] = None) -> Image:
        repository = row_value(row, "Repository", "repository")
        tag = row_value(row, "Tag", "tag")
        tags: Tuple[str, ...] = ()
        if repository and tag and NONE_VALUE not in (repository, tag):
            tags = (f"{repository}:{tag}",)
        return Image(
            id=image_id,
            tags=tags,
            created=row_value(row, "CreatedAt", "created"),
            size=parse_size(row_value(row, "Size", "size")),
            degraded=True,
            client=self.client,
        )
