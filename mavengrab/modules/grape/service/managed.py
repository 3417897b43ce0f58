"""Append-only store of versions pinned by earlier resolutions."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from mavengrab.modules.grape.domain import ManagedDependency, ResolvedArtifact


class ManagedDependencySet:
    """Ordered managed dependencies owned by a single engine.

    Entries are never removed or replaced. When a module appears more than
    once the earliest entry is the one that pins its version.
    """

    def __init__(self, initial: Iterable[ManagedDependency] = ()) -> None:
        self._entries: List[ManagedDependency] = []
        self._lock = threading.Lock()
        self.extend(initial)

    def extend(self, entries: Iterable[ManagedDependency]) -> None:
        batch = list(entries)
        with self._lock:
            self._entries.extend(batch)

    def record_resolved(self, artifacts: Iterable[ResolvedArtifact]) -> None:
        self.extend(ManagedDependency(artifact.coordinate) for artifact in artifacts)

    def snapshot(self) -> Tuple[ManagedDependency, ...]:
        with self._lock:
            return tuple(self._entries)

    def pinned_versions(self) -> Dict[Tuple[str, str], str]:
        versions: Dict[Tuple[str, str], str] = {}
        for entry in self.snapshot():
            versions.setdefault(entry.key, entry.version)
        return versions

    def version_of(self, group: str, module: str) -> Optional[str]:
        return self.pinned_versions().get((group, module))

    def __iter__(self) -> Iterator[ManagedDependency]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
