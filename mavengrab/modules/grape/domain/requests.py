"""Request/response contract between the coordinator and a resolution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from .constants import (
    SCOPE_COMPILE,
    SCOPE_PROVIDED,
    SCOPE_RUNTIME,
    SCOPE_SYSTEM,
    SCOPE_TEST,
)
from .coordinates import DependencyDescriptor, ManagedDependency, ResolvedArtifact
from .repository import Repository

# provided artifacts are supplied by the host at run time, so no grab adds them
_CLASSPATH_SCOPES = {
    SCOPE_COMPILE: frozenset({SCOPE_COMPILE, SCOPE_SYSTEM}),
    SCOPE_RUNTIME: frozenset({SCOPE_COMPILE, SCOPE_RUNTIME}),
    SCOPE_TEST: frozenset({SCOPE_COMPILE, SCOPE_PROVIDED, SCOPE_RUNTIME, SCOPE_SYSTEM, SCOPE_TEST}),
}


@dataclass(frozen=True)
class ScopeFilter:
    """Accepts resolved nodes whose effective scope is in ``scopes``."""

    scopes: FrozenSet[str]

    def accept(self, scope: str) -> bool:
        return scope in self.scopes


def classpath_filter(scope: str = SCOPE_COMPILE) -> ScopeFilter:
    try:
        return ScopeFilter(_CLASSPATH_SCOPES[scope])
    except KeyError:
        raise ValueError(f"Unknown classpath scope: {scope}") from None


@dataclass(frozen=True)
class CollectRequest:
    """Everything an engine needs to collect and resolve one batch."""

    dependencies: Tuple[DependencyDescriptor, ...]
    repositories: Tuple[Repository, ...]
    managed: Tuple[ManagedDependency, ...] = ()
    root: Optional[DependencyDescriptor] = None


@dataclass
class DependencyResult:
    artifacts: list[ResolvedArtifact] = field(default_factory=list)
