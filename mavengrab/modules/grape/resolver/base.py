"""Contract of the engine that collects and downloads dependency graphs."""

from __future__ import annotations

from typing import Protocol

from mavengrab.modules.grape.domain import CollectRequest, DependencyResult, ScopeFilter


class ResolutionEngine(Protocol):
    def collect_and_resolve(self, request: CollectRequest, scope_filter: ScopeFilter) -> DependencyResult:
        """Resolve the full graph of ``request`` or raise; never return partial results."""
        ...
