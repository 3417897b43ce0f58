"""Host-facing grape engine: grab dependencies onto a load path."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, List, Mapping, Optional, Union

from mavengrab.modules.grape.domain import (
    DEFAULT_LAYOUT,
    ManagedDependency,
    Repository,
    parse_exclusions,
)
from mavengrab.modules.grape.exceptions import (
    DependencyResolutionFailedError,
    InvalidRepositoryError,
    UnsupportedOperationError,
)
from mavengrab.modules.grape.progress import ProgressReporter
from mavengrab.modules.grape.repositories import RepositoryRegistry
from mavengrab.modules.grape.resolver.base import ResolutionEngine

from .builder import DependencyBuilder
from .classpath import ClassPath
from .coordinator import ResolutionCoordinator
from .managed import ManagedDependencySet

log = logging.getLogger(__name__)

LOADER_KEYS = ("classLoader", "loader")


class GrapeEngine:
    """Resolves grab requests and adds the resulting files to a class path.

    One instance owns one managed dependency set and one repository registry.
    Calls are serialised with a re-entrant lock; create separate instances
    for independent sessions.
    """

    def __init__(
        self,
        resolution_engine: ResolutionEngine,
        registry: RepositoryRegistry,
        reporter: ProgressReporter,
        classpath: Optional[ClassPath] = None,
        managed_dependencies: Iterable[ManagedDependency] = (),
    ) -> None:
        self.registry = registry
        self.classpath = classpath or ClassPath()
        self.builder = DependencyBuilder()
        self.managed = ManagedDependencySet(managed_dependencies)
        self.coordinator = ResolutionCoordinator(
            resolution_engine,
            registry,
            managed=self.managed,
            reporter=reporter,
        )
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ grab
    def grab(self, args: Union[Mapping[str, Any], str, None], *dependencies: Mapping[str, Any]) -> None:
        """Resolve ``dependencies`` (or ``args`` itself when none are given)."""
        if isinstance(args, str):
            raise UnsupportedOperationError("Grabbing an endorsed module is not supported")
        args = args or {}
        classpath = self._classpath_for(args)
        records = dependencies or (args,)
        exclusions = parse_exclusions(args)
        descriptors = self.builder.build_from_dicts(records, exclusions)
        with self._lock:
            artifacts = self.coordinator.resolve(descriptors)
            for artifact in artifacts:
                try:
                    classpath.add_file(artifact.file)
                except ValueError as exc:
                    raise DependencyResolutionFailedError(exc) from exc
            log.debug("Added %d files to class path %s", len(artifacts), classpath.name)
        return None

    def _classpath_for(self, args: Mapping[str, Any]) -> ClassPath:
        for key in LOADER_KEYS:
            loader = args.get(key)
            if loader is None:
                continue
            if not isinstance(loader, ClassPath):
                raise TypeError(f"'{key}' must be a ClassPath, got {type(loader).__name__}")
            return loader
        return self.classpath

    # ------------------------------------------------------------------ resolvers
    def add_resolver(self, args: Mapping[str, Any]) -> None:
        name = args.get("name")
        root = args.get("root")
        if not isinstance(name, str) or not name.strip():
            raise InvalidRepositoryError("Resolver requires a 'name'")
        if not isinstance(root, str) or not root.strip():
            raise InvalidRepositoryError("Resolver requires a 'root' url")
        repository = Repository(id=name.strip(), url=root.strip().rstrip("/"), layout=DEFAULT_LAYOUT)
        with self._lock:
            self.registry.register(repository)

    @property
    def repositories(self) -> List[Repository]:
        return self.registry.as_ordered_list()

    def close(self) -> None:
        """Release network clients held by the resolution engine."""
        close = getattr(self.coordinator.engine, "close", None)
        if close is not None:
            close()

    # ------------------------------------------------------------------ unsupported
    def enumerate_grapes(self) -> Any:
        raise UnsupportedOperationError("Grape enumeration is not supported")

    def resolve(self, args: Mapping[str, Any], *dependencies: Any) -> Any:
        raise UnsupportedOperationError("Resolving to URIs is not supported")

    def list_dependencies(self, loader: Any) -> Any:
        raise UnsupportedOperationError("Listing dependencies is not supported")
