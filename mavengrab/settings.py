"""Runtime configuration for the mavengrab resolution service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_local_repository() -> str:
    return str(Path.home() / ".m2" / "repository")


class Settings(BaseSettings):
    """Configuration values mapped from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "mavengrab"
    version: str = Field("0.1.0", validation_alias=AliasChoices("APP_VERSION", "version"))
    log_level: str = "INFO"

    # Repositories as "id=url", highest priority first
    grape_repositories: List[str] = Field(
        default_factory=lambda: [
            "central=https://repo.maven.apache.org/maven2",
            "spring-milestone=https://repo.spring.io/milestone",
        ]
    )
    grape_local_repository: str = Field(default_factory=_default_local_repository)
    grape_http_timeout: float = 30.0

    # Proxy applied to repositories that do not carry their own
    grape_proxy_url: Optional[str] = None
    grape_non_proxy_hosts: List[str] = Field(default_factory=list)

    # Progress output
    grape_report_downloads: bool = False
    grape_progress_initial_delay: float = 2.0
    grape_progress_interval: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance for dependency injection."""
    return Settings()
