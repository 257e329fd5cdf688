"""The Docker facade: typed operations over the docker CLI.

Every operation is a coroutine returning a ``CommandResult``. Command-level
failure is reported as ``ok=False``; only missing caller input raises
(``PreconditionError``), and it does so before any process is started.
"""

from typing import Any, List, Mapping, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from ..config import Settings, settings as default_settings
from ..models import (
    BuildOptions,
    CommandResult,
    InvocationResult,
    ListOptions,
    LoginOptions,
    OutputFormat,
    OutputParseError,
    PreconditionError,
    RunOptions,
    SearchOptions,
)
from ..utils.identifiers import short_id
from . import commands
from .detection import DockerInstallation, detect_docker
from .parsers import parse_json_document, parse_json_lines, parse_table
from .process import ProcessEnvironment, ProcessExecutor
from .reifier import CONTAINER, IMAGE, EntityReifier

logger = structlog.get_logger(__name__)

OptionsT = TypeVar("OptionsT", bound=BaseModel)

# Table headers the legacy listing path must see
_TABLE_COLUMNS = {
    CONTAINER: ("container_id",),
    IMAGE: ("image_id",),
}


def _coerce_options(model: Type[OptionsT], options: Optional[OptionsT], fields: Mapping[str, Any]) -> OptionsT:
    if options is not None and fields:
        raise PreconditionError("Pass either an options object or keyword fields, not both")
    if options is not None:
        return options
    try:
        return model(**fields)
    except ValidationError as e:
        raise PreconditionError(
            f"Invalid {model.__name__}: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e


def _last_line(text: str) -> str:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else ""


class Docker:
    """Client for the docker command-line tool.

    Holds only per-client configuration: the binary, the echo flag and the
    environment baseline captured at construction.

    Example:
        docker = Docker(echo=True)
        result = await docker.ps()
        if result.ok:
            for container in result.payload:
                print(container.id, container.state)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        echo: Optional[bool] = None,
        env: Optional[Mapping[str, str]] = None,
        executor: Optional[ProcessExecutor] = None,
    ):
        self.settings = settings or default_settings
        config = self.settings.docker
        self.echo = config.echo if echo is None else echo
        self.environment = ProcessEnvironment.from_host(config.env_passthrough, overrides=env)
        self.executor = executor or ProcessExecutor(
            binary=config.binary,
            environment=self.environment,
            echo=self.echo,
        )
        self.reifier = EntityReifier(self.executor, client=self)

    @classmethod
    async def detect(cls, binary: Optional[str] = None) -> Optional[DockerInstallation]:
        """Report whether the binary is installed, and its version."""
        return await detect_docker(binary or default_settings.docker_binary)

    async def _cmd(
        self,
        args: List[str],
        *,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        stdin: Optional[str] = None,
    ) -> InvocationResult:
        return await self.executor.execute(args, cwd=cwd, env=env, stdin=stdin)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def ps(self, options: Optional[ListOptions] = None, **fields: Any) -> CommandResult:
        """List containers; payload is a list of ``Container`` in listing order."""
        options = _coerce_options(ListOptions, options, fields)
        return await self._listing(commands.ps_args(options), options, CONTAINER)

    async def images(self, options: Optional[ListOptions] = None, **fields: Any) -> CommandResult:
        """List images; payload is a list of ``Image`` in listing order."""
        options = _coerce_options(ListOptions, options, fields)
        return await self._listing(commands.images_args(options), options, IMAGE)

    async def _listing(self, args: List[str], options: ListOptions, kind: str) -> CommandResult:
        invocation = await self._cmd(args)
        if not invocation.ok:
            return CommandResult.from_invocation(invocation)

        enrich = self.settings.docker_enrich if options.enrich is None else options.enrich
        try:
            if options.output == OutputFormat.TABLE:
                rows = parse_table(invocation.stdout, expected_columns=_TABLE_COLUMNS[kind])
            else:
                rows = parse_json_lines(invocation.stdout)
            # One inspect at a time, in listing order
            entities, degraded = await self.reifier.reify_rows(rows, kind, enrich=enrich)
        except OutputParseError as e:
            logger.warning("Could not parse docker listing", command=args[0], error=e.message)
            return CommandResult.parse_failure(invocation, e)

        if degraded:
            logger.info(
                "Listing returned degraded entities",
                command=args[0],
                total=len(entities),
                degraded=[short_id(entity_id) for entity_id in degraded],
            )
        return CommandResult.from_invocation(invocation, payload=entities, degraded_ids=tuple(degraded))

    async def search(self, term: str, options: Optional[SearchOptions] = None, **fields: Any) -> CommandResult:
        """Search the registry; payload is a list of result rows."""
        options = _coerce_options(SearchOptions, options, fields)
        invocation = await self._cmd(commands.search_args(term, options))
        if not invocation.ok:
            return CommandResult.from_invocation(invocation)
        try:
            rows = parse_json_lines(invocation.stdout)
        except OutputParseError as e:
            return CommandResult.parse_failure(invocation, e)
        return CommandResult.from_invocation(invocation, payload=rows)

    # ------------------------------------------------------------------
    # Images and containers
    # ------------------------------------------------------------------

    async def hello(self) -> CommandResult:
        """Run the hello-world image attached."""
        return CommandResult.from_invocation(await self._cmd(commands.hello_args()))

    async def build(self, options: Optional[BuildOptions] = None, **fields: Any) -> CommandResult:
        """Build an image; payload is the built ``Image`` (None with ``no_id``).

        The image id is read from an ``--iidfile`` side channel because the
        streamed build output is not reliable to parse.
        """
        options = _coerce_options(BuildOptions, options, fields)
        if options.no_id:
            invocation = await self._cmd(commands.build_args(options), cwd=options.cwd, env=options.process_env)
            return CommandResult.from_invocation(invocation)

        async with commands.IdFile(directory=self.settings.docker_tmp_dir) as id_file:
            invocation = await self._cmd(
                commands.build_args(options, id_file.path),
                cwd=options.cwd,
                env=options.process_env,
            )
            image_id = id_file.read_id() if invocation.ok else None

        if not invocation.ok:
            logger.warning("Docker build failed", tag=options.tag, exit_code=invocation.exit_code)
            return CommandResult.from_invocation(invocation)
        if image_id is None:
            return CommandResult.parse_failure(invocation, OutputParseError("Build did not write an image id"))

        image = await self.reifier.reify_image(image_id)
        logger.info("Built docker image", tag=options.tag, image_id=image.short_id)
        return CommandResult.from_invocation(
            invocation,
            payload=image,
            degraded_ids=(image.id,) if image.degraded else (),
        )

    async def run(self, options: Optional[RunOptions] = None, **fields: Any) -> CommandResult:
        """Run a container.

        Detached (the default): payload is the started ``Container``.
        Attached: the call waits for the container to exit; no payload.

        Raises:
            PreconditionError: No image given; nothing is spawned
        """
        options = _coerce_options(RunOptions, options, fields)
        args = commands.run_args(options)
        invocation = await self._cmd(args, env=options.process_env)
        if not invocation.ok or not options.detach:
            return CommandResult.from_invocation(invocation)

        container_id = _last_line(invocation.stdout)
        if not container_id:
            return CommandResult.parse_failure(invocation, OutputParseError("run did not print a container id"))

        container = await self.reifier.reify_container(container_id)
        logger.info("Started docker container", image=options.image, container_id=container.short_id)
        return CommandResult.from_invocation(
            invocation,
            payload=container,
            degraded_ids=(container.id,) if container.degraded else (),
        )

    async def kill(self, container_id: str, signal: Optional[str] = None) -> CommandResult:
        """Kill a container; payload is the id docker echoed back."""
        invocation = await self._cmd(commands.kill_args(container_id, signal))
        if not invocation.ok:
            return CommandResult.from_invocation(invocation)
        return CommandResult.from_invocation(invocation, payload=_last_line(invocation.stdout) or container_id)

    async def inspect(self, name_or_id: str, kind: Optional[str] = None) -> CommandResult:
        """Inspect any object; payload is the list of JSON documents."""
        invocation = await self._cmd(commands.inspect_args(name_or_id, kind))
        return self._json_result(invocation)

    async def info(self) -> CommandResult:
        """System-wide information; payload is a JSON object."""
        return self._json_result(await self._cmd(commands.info_args()))

    async def version(self) -> CommandResult:
        """Client and server versions; payload is a JSON object."""
        return self._json_result(await self._cmd(commands.version_args()))

    def _json_result(self, invocation: InvocationResult) -> CommandResult:
        if not invocation.ok:
            return CommandResult.from_invocation(invocation)
        try:
            document = parse_json_document(invocation.stdout)
        except OutputParseError as e:
            return CommandResult.parse_failure(invocation, e)
        return CommandResult.from_invocation(invocation, payload=document)

    # ------------------------------------------------------------------
    # Registry credentials
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str, server: Optional[str] = None) -> CommandResult:
        """Log in to a registry. The password is piped on stdin."""
        options = _coerce_options(LoginOptions, None, {"username": username, "password": password, "server": server})
        args, secret = commands.login_args(options)
        invocation = await self._cmd(args, stdin=secret)
        if invocation.ok:
            logger.info("Logged in to registry", server=server or "default", username=username)
        return CommandResult.from_invocation(invocation)

    async def logout(self, server: Optional[str] = None) -> CommandResult:
        return CommandResult.from_invocation(await self._cmd(commands.logout_args(server)))
