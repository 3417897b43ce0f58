"""Grape module: grab Maven dependencies at runtime."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import httpx

from mavengrab.settings import Settings

from .domain import ManagedDependency
from .progress import ProgressReporter, create_progress_reporter
from .repositories import RepositoryRegistry, parse_repository_spec, proxy_selector_from_settings
from .resolver import MavenResolutionEngine, RepositoryTransport
from .service import ClassPath, GrapeEngine


def create_grape_engine(
    settings: Settings,
    *,
    client: Optional[httpx.Client] = None,
    reporter: Optional[ProgressReporter] = None,
    classpath: Optional[ClassPath] = None,
    managed_dependencies: Iterable[ManagedDependency] = (),
) -> GrapeEngine:
    """Wire a GrapeEngine backed by the Maven resolver from ``settings``."""
    reporter = reporter or create_progress_reporter(
        settings.grape_report_downloads,
        initial_delay=settings.grape_progress_initial_delay,
        interval=settings.grape_progress_interval,
    )
    registry = RepositoryRegistry(
        proxy_selector_from_settings(settings.grape_proxy_url, settings.grape_non_proxy_hosts),
        [parse_repository_spec(spec) for spec in settings.grape_repositories],
    )
    transport = RepositoryTransport(
        Path(settings.grape_local_repository),
        timeout=settings.grape_http_timeout,
        client=client,
        listener=reporter,
    )
    return GrapeEngine(
        MavenResolutionEngine(transport),
        registry,
        reporter,
        classpath=classpath,
        managed_dependencies=managed_dependencies,
    )


__all__ = ["ClassPath", "GrapeEngine", "create_grape_engine"]
