"""Configuration management for dockercli.

This module provides a unified Settings class with flat fields read from the
environment, plus grouped views over them.

Usage:
    from dockercli.config import settings

    # Access grouped settings
    settings.docker.binary
    settings.logging.level

    # Or use the flat fields
    settings.docker_binary
    settings.log_level
"""

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Import grouped configurations
from .docker import DockerConfig, split_names
from .logging import LoggingConfig


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # Docker CLI Configuration
    docker_binary: str = Field(default="docker", min_length=1, description="Name or path of the docker binary")
    docker_echo: bool = Field(default=False, description="Mirror subprocess output to the echo logger")
    docker_env_passthrough: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["HOME", "PATH"],
        description="Host environment variables copied into every invocation",
    )
    docker_tmp_dir: str | None = Field(default=None, description="Directory for image id side-channel files")
    docker_enrich: bool = Field(default=True, description="Inspect every listed container/image")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: str | None = Field(default=None)
    log_max_size_mb: int = Field(default=100, ge=1)
    log_backup_count: int = Field(default=5, ge=1)

    @field_validator("docker_env_passthrough", mode="before")
    @classmethod
    def parse_env_passthrough(cls, v):
        """Parse comma-separated variable names into a list."""
        return split_names(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Only json and console renderers exist."""
        if v.lower() not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v.lower()

    # ========================================================================
    # GROUPED CONFIG ACCESS
    # ========================================================================

    @property
    def docker(self) -> DockerConfig:
        """Access docker CLI configuration group."""
        return DockerConfig(
            docker_binary=self.docker_binary,
            docker_echo=self.docker_echo,
            docker_env_passthrough=self.docker_env_passthrough,
            docker_tmp_dir=self.docker_tmp_dir,
            docker_enrich=self.docker_enrich,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(
            log_level=self.log_level,
            log_format=self.log_format,
            log_file=self.log_file,
            log_max_size_mb=self.log_max_size_mb,
            log_backup_count=self.log_backup_count,
        )


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "DockerConfig",
    "LoggingConfig",
]
