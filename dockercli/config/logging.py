"""Logging configuration."""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    """Logging settings used by ``setup_logging``."""

    level: str = Field(default="INFO", alias="log_level")
    format: str = Field(default="json", alias="log_format", description="json or console")
    file: str | None = Field(default=None, alias="log_file", description="Rotating log file, off when unset")
    max_size_mb: int = Field(default=100, ge=1, alias="log_max_size_mb")
    backup_count: int = Field(default=5, ge=1, alias="log_backup_count")

    @property
    def level_number(self) -> int:
        """Numeric stdlib level; unknown names fall back to INFO."""
        return getattr(logging, self.level.upper(), logging.INFO)

    class Config:
        env_prefix = ""
        extra = "ignore"
