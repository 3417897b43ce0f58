"""Issues resolution requests and folds resolved versions into managed state."""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence

from mavengrab.modules.grape.domain import (
    SCOPE_COMPILE,
    CollectRequest,
    DependencyDescriptor,
    ResolvedArtifact,
    classpath_filter,
)
from mavengrab.modules.grape.exceptions import DependencyResolutionFailedError
from mavengrab.modules.grape.progress import NoOpProgressReporter, ProgressReporter
from mavengrab.modules.grape.repositories import RepositoryRegistry
from mavengrab.modules.grape.resolver.base import ResolutionEngine

from .managed import ManagedDependencySet

log = logging.getLogger(__name__)


class ResolutionCoordinator:
    """Single-writer owner of the managed set for one engine instance.

    Not safe for concurrent ``resolve`` calls on its own; ``GrapeEngine``
    serialises access.
    """

    def __init__(
        self,
        engine: ResolutionEngine,
        registry: RepositoryRegistry,
        managed: Optional[ManagedDependencySet] = None,
        reporter: Optional[ProgressReporter] = None,
    ) -> None:
        self.engine = engine
        self.registry = registry
        self.managed = managed if managed is not None else ManagedDependencySet()
        self.reporter = reporter or NoOpProgressReporter()
        self.scope_filter = classpath_filter(SCOPE_COMPILE)

    def build_request(self, descriptors: Sequence[DependencyDescriptor]) -> CollectRequest:
        return CollectRequest(
            dependencies=tuple(descriptors),
            repositories=tuple(self.registry.as_ordered_list()),
            managed=self.managed.snapshot(),
            root=None,
        )

    def resolve(self, descriptors: Sequence[DependencyDescriptor]) -> List[ResolvedArtifact]:
        request = self.build_request(descriptors)
        log.info(
            "Resolving %s against %d repositories (%d managed)",
            ", ".join(str(d.coordinate) for d in request.dependencies) or "-",
            len(request.repositories),
            len(request.managed),
        )
        start_time = time.time()
        try:
            result = self.engine.collect_and_resolve(request, self.scope_filter)
            artifacts = list(result.artifacts)
            self.managed.record_resolved(artifacts)
        except Exception as exc:  # noqa: BLE001
            log.warning("Resolution failed for %s: %s", ", ".join(str(d.coordinate) for d in descriptors), exc)
            raise DependencyResolutionFailedError(exc) from exc
        finally:
            self.reporter.finished()
        log.info("Resolved %d artifacts in %.2fs", len(artifacts), time.time() - start_time)
        return artifacts
