"""Wiring of the long-lived services shared by the API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from mavengrab.modules.grape import GrapeEngine, create_grape_engine

from .settings import Settings

log = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Container that wires plain-Python services with shared settings."""

    settings: Settings
    client: Optional[httpx.Client] = None
    grape_engine: GrapeEngine = field(init=False)

    def __post_init__(self) -> None:
        self.grape_engine = create_grape_engine(self.settings, client=self.client)

    def close(self) -> None:
        self.grape_engine.close()


def bootstrap_services(container: ServiceContainer) -> None:
    """Log the effective configuration once the app starts."""
    log.info("...................RUN...................")
    log.info(
        "########### repositories=%s local=%s report_downloads=%s ############",
        ",".join(repo.id for repo in container.grape_engine.repositories),
        container.settings.grape_local_repository,
        container.settings.grape_report_downloads,
    )
