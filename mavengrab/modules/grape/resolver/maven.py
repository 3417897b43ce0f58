"""Collects dependency graphs from Maven repositories and downloads their files."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from mavengrab.modules.grape.domain import (
    SCOPE_COMPILE,
    SCOPE_PROVIDED,
    SCOPE_RUNTIME,
    SCOPE_SYSTEM,
    SCOPE_TEST,
    CollectRequest,
    DependencyCoordinate,
    DependencyResult,
    Exclusion,
    Repository,
    ResolvedArtifact,
    ScopeFilter,
)
from mavengrab.modules.grape.exceptions import ArtifactDescriptorError

from .pom import EffectivePom, build_effective_pom, import_declarations, parse_metadata_versions, parse_pom
from .transport import RepositoryTransport
from .versions import is_dynamic, select_version

log = logging.getLogger(__name__)

# (parent scope, declared scope) -> effective scope; missing pairs are not followed
_SCOPE_MEDIATION = {
    (SCOPE_COMPILE, SCOPE_COMPILE): SCOPE_COMPILE,
    (SCOPE_COMPILE, SCOPE_RUNTIME): SCOPE_RUNTIME,
    (SCOPE_RUNTIME, SCOPE_COMPILE): SCOPE_RUNTIME,
    (SCOPE_RUNTIME, SCOPE_RUNTIME): SCOPE_RUNTIME,
    (SCOPE_PROVIDED, SCOPE_COMPILE): SCOPE_PROVIDED,
    (SCOPE_PROVIDED, SCOPE_RUNTIME): SCOPE_PROVIDED,
    (SCOPE_TEST, SCOPE_COMPILE): SCOPE_TEST,
    (SCOPE_TEST, SCOPE_RUNTIME): SCOPE_TEST,
}
_SCOPE_WIDTH = {SCOPE_COMPILE: 4, SCOPE_RUNTIME: 3, SCOPE_PROVIDED: 2, SCOPE_TEST: 1, SCOPE_SYSTEM: 0}
_MAX_PARENT_DEPTH = 32

ConflictKey = Tuple[str, str, str, str]


def mediate_scope(parent_scope: str, declared_scope: Optional[str]) -> Optional[str]:
    return _SCOPE_MEDIATION.get((parent_scope, declared_scope or SCOPE_COMPILE))


@dataclass(eq=False)
class _Node:
    coordinate: DependencyCoordinate
    scope: str
    exclusions: FrozenSet[Exclusion]
    depth: int
    # (declared scope, child node) for every child queued below this node
    children: List[Tuple[Optional[str], "_Node"]] = field(default_factory=list)

    @property
    def conflict_key(self) -> ConflictKey:
        c = self.coordinate
        return (c.group, c.module, c.packaging, c.classifier)

    @property
    def walks_children(self) -> bool:
        return self.scope != SCOPE_SYSTEM and not any(e.is_wildcard for e in self.exclusions)


class MavenResolutionEngine:
    """Breadth-first Maven resolver with nearest-wins conflict mediation.

    Managed versions pin transitive dependencies; direct dependencies keep
    their declared version unless it is dynamic (``*``, ``latest.release``,
    ``1.+`` or a range), in which case a managed pin is preferred and the
    repository metadata is consulted otherwise.
    """

    def __init__(self, transport: RepositoryTransport) -> None:
        self.transport = transport
        self._pom_cache: Dict[DependencyCoordinate, EffectivePom] = {}

    def close(self) -> None:
        self.transport.close()

    def collect_and_resolve(self, request: CollectRequest, scope_filter: ScopeFilter) -> DependencyResult:
        repositories = list(request.repositories)
        pins: Dict[Tuple[str, str], str] = {}
        for managed in request.managed:
            pins.setdefault(managed.key, managed.version)

        nodes = self.collect(request, pins, repositories)
        artifacts: List[ResolvedArtifact] = []
        for node in nodes:
            if not scope_filter.accept(node.scope):
                log.debug("Skipping %s (scope %s)", node.coordinate, node.scope)
                continue
            path, repository_id = self.transport.fetch(node.coordinate, repositories)
            artifacts.append(ResolvedArtifact(node.coordinate, path, repository_id))
        return DependencyResult(artifacts=artifacts)

    # ------------------------------------------------------------------ collection
    def collect(
        self,
        request: CollectRequest,
        pins: Dict[Tuple[str, str], str],
        repositories: Sequence[Repository],
    ) -> List[_Node]:
        queue: Deque[_Node] = deque(
            _Node(d.coordinate, d.scope, frozenset(d.exclusions), 1) for d in request.dependencies
        )
        winners: Dict[ConflictKey, _Node] = {}

        while queue:
            node = queue.popleft()
            existing = winners.get(node.conflict_key)
            if existing is not None:
                self._widen(existing, node.scope, winners)
                log.debug("Omitting %s, nearer %s wins", node.coordinate, existing.coordinate)
                continue

            node.coordinate = node.coordinate.with_version(self._select_version(node, pins, repositories))
            winners[node.conflict_key] = node
            if not node.walks_children:
                continue

            pom = self.effective_pom(node.coordinate.pom(), repositories)
            if pom is None:
                log.warning("The POM for %s is missing, no dependency information available", node.coordinate)
                continue
            for dep in pom.dependencies:
                if dep.optional:
                    continue
                child_scope = mediate_scope(node.scope, dep.scope)
                if child_scope is None:
                    continue
                if any(exclusion.matches(dep.group, dep.module) for exclusion in node.exclusions):
                    log.debug("Excluding %s:%s below %s", dep.group, dep.module, node.coordinate)
                    continue
                version = pins.get((dep.group, dep.module)) or dep.version
                if not version:
                    raise ArtifactDescriptorError(
                        f"Dependency {dep.group}:{dep.module} of {node.coordinate} has no version"
                    )
                child = _Node(dep.coordinate(version), child_scope, node.exclusions | dep.exclusions, node.depth + 1)
                node.children.append((dep.scope, child))
                queue.append(child)
        return list(winners.values())

    def _widen(self, node: _Node, scope: str, winners: Dict[ConflictKey, _Node]) -> None:
        """Raise ``node`` to ``scope`` and re-mediate everything already queued below it."""
        if _SCOPE_WIDTH.get(scope, 0) <= _SCOPE_WIDTH.get(node.scope, 0):
            return
        log.debug("Widening scope of %s from %s to %s", node.coordinate, node.scope, scope)
        node.scope = scope
        for declared, child in node.children:
            child_scope = mediate_scope(scope, declared)
            if child_scope is None:
                continue
            self._widen(child, child_scope, winners)
            winner = winners.get(child.conflict_key)
            if winner is not None and winner is not child:
                self._widen(winner, child_scope, winners)

    def _select_version(
        self,
        node: _Node,
        pins: Dict[Tuple[str, str], str],
        repositories: Sequence[Repository],
    ) -> str:
        declared = node.coordinate.version
        if not is_dynamic(declared):
            return declared
        pinned = pins.get(node.coordinate.key)
        if pinned and not is_dynamic(pinned):
            log.debug("Using managed version %s for %s", pinned, node.coordinate)
            return pinned
        available: List[str] = []
        for document in self.transport.fetch_metadata(node.coordinate.group, node.coordinate.module, repositories):
            available.extend(parse_metadata_versions(document, source=str(node.coordinate)))
        version = select_version(declared, available)
        log.info("Resolved %s:%s:%s to %s", node.coordinate.group, node.coordinate.module, declared, version)
        return version

    # ------------------------------------------------------------------ descriptors
    def effective_pom(
        self,
        coords: DependencyCoordinate,
        repositories: Sequence[Repository],
        _chain: Optional[Set[DependencyCoordinate]] = None,
    ) -> Optional[EffectivePom]:
        """Load ``coords`` with its parent chain and imported BOMs; None when absent."""
        if coords in self._pom_cache:
            return self._pom_cache[coords]
        chain = set(_chain or ())
        if coords in chain or len(chain) > _MAX_PARENT_DEPTH:
            raise ArtifactDescriptorError(f"Cycle or excessive depth in POM hierarchy at {coords}")
        chain.add(coords)

        path = self.transport.fetch_optional(coords, repositories)
        if path is None:
            return None
        raw = parse_pom(path.read_bytes(), source=str(path))

        parent = None
        if raw.parent is not None:
            parent = self.effective_pom(raw.parent, repositories, chain)
            if parent is None:
                raise ArtifactDescriptorError(f"Parent POM {raw.parent} of {coords} could not be found")

        imports = []
        for bom in import_declarations(raw, parent):
            imported = self.effective_pom(bom, repositories, chain)
            if imported is None:
                log.warning("Imported BOM %s of %s is missing", bom, coords)
                continue
            imports.append(imported)

        pom = build_effective_pom(raw, parent, imports)
        self._pom_cache[coords] = pom
        return pom
