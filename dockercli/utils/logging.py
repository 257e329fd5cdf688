"""Logging configuration for dockercli."""

# Standard library imports
import logging
import logging.handlers
import sys
from pathlib import Path

# Third-party imports
import structlog

# Local application imports
from .._version import __version__
from ..config import LoggingConfig, Settings, settings as default_settings

ECHO_LOGGER = "dockercli.echo"


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structured logging for an application embedding dockercli.

    The library itself never calls this; it only emits through
    ``structlog.get_logger``.
    """
    config = (settings or default_settings).logging

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=config.level_number)

    structlog.configure(
        processors=[*_shared_processors(), _renderer(config)],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if config.file:
        setup_file_logging(config)

    configure_echo_logger(config)


def _shared_processors() -> list:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_service_context,
    ]


def _renderer(config: LoggingConfig):
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def setup_file_logging(config: LoggingConfig) -> None:
    """Add a rotating file handler to the root logger."""
    if not config.file:
        return

    path = Path(config.file)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=config.max_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    # JSON lines are already rendered by structlog
    pattern = "%(message)s" if config.format == "json" else "%(asctime)s %(name)s %(levelname)s %(message)s"
    handler.setFormatter(logging.Formatter(pattern))
    handler.setLevel(config.level_number)

    logging.getLogger().addHandler(handler)


def configure_echo_logger(config: LoggingConfig) -> None:
    """Let mirrored docker output through even when the root level is higher."""
    logging.getLogger(ECHO_LOGGER).setLevel(min(config.level_number, logging.INFO))


def add_service_context(logger, method_name, event_dict):
    """Add service context information to log entries."""
    event_dict["service"] = "dockercli"
    event_dict["version"] = __version__
    return event_dict


def get_echo_logger() -> structlog.BoundLogger:
    """Get the logger that mirrors subprocess output when echo is enabled."""
    return structlog.get_logger(ECHO_LOGGER)
