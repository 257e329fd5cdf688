"""Docker CLI configuration."""

from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


def split_names(value):
    """Accept a comma-separated string as well as a list of names."""
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return value


class DockerConfig(BaseSettings):
    """Settings for invoking the docker binary."""

    binary: str = Field(default="docker", alias="docker_binary")
    echo: bool = Field(default=False, alias="docker_echo")
    env_passthrough: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["HOME", "PATH"], alias="docker_env_passthrough"
    )
    tmp_dir: str | None = Field(default=None, alias="docker_tmp_dir")
    enrich: bool = Field(default=True, alias="docker_enrich")

    @field_validator("env_passthrough", mode="before")
    @classmethod
    def parse_env_passthrough(cls, v):
        return split_names(v)

    class Config:
        env_prefix = ""
        extra = "ignore"
