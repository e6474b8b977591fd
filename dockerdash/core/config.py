from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SOCKET_PATH = "/var/run/docker.sock"


class Settings(BaseSettings):
    DOCKER_SOCKET_PATH: str = Field(
        default=DEFAULT_SOCKET_PATH,
        validation_alias=AliasChoices("DOCKER_SOCKET_PATH", "DOCKERDASH_DOCKER_SOCKET_PATH"),
        description="Path of the daemon control socket",
    )

    DOCKER_TIMEOUT: int = Field(
        default=30,
        description="Timeout in seconds for a single daemon request",
    )

    STATS_TIMEOUT: float = Field(
        default=10.0,
        description="Upper bound for one per-container stats snapshot",
    )

    REQUIRE_DAEMON: bool = Field(
        default=False,
        description="Refuse to start when the daemon is unreachable instead of running degraded",
    )

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DOCKERDASH_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
