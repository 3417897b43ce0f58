"""Value objects describing artifacts, exclusions and resolved files."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple

from .constants import DEFAULT_PACKAGING, SCOPE_COMPILE, WILDCARD


@dataclass(frozen=True)
class DependencyCoordinate:
    """Represents a Maven artifact coordinate."""

    group: str
    module: str
    version: str
    packaging: str = DEFAULT_PACKAGING
    classifier: str = ""

    @property
    def key(self) -> Tuple[str, str]:
        return (self.group, self.module)

    @property
    def filename(self) -> str:
        suffix = f"-{self.classifier}" if self.classifier else ""
        return f"{self.module}-{self.version}{suffix}.{self.packaging}"

    @property
    def path_segments(self) -> List[str]:
        group_path = self.group.replace(".", "/")
        return [group_path, self.module, self.version, self.filename]

    def with_version(self, version: str) -> "DependencyCoordinate":
        return replace(self, version=version)

    def pom(self) -> "DependencyCoordinate":
        return replace(self, packaging="pom", classifier="")

    def __str__(self) -> str:
        parts = [self.group, self.module]
        if self.packaging != DEFAULT_PACKAGING or self.classifier:
            parts.append(self.packaging)
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)


@dataclass(frozen=True)
class Exclusion:
    """Removes a (group, module) pair, or everything, from a transitive walk."""

    group: str = WILDCARD
    module: str = WILDCARD

    @property
    def is_wildcard(self) -> bool:
        return self.group == WILDCARD and self.module == WILDCARD

    def matches(self, group: str, module: str) -> bool:
        return (self.group in (WILDCARD, group)) and (self.module in (WILDCARD, module))


WILDCARD_EXCLUSION = Exclusion(WILDCARD, WILDCARD)


@dataclass(frozen=True)
class DependencyDescriptor:
    coordinate: DependencyCoordinate
    exclusions: FrozenSet[Exclusion] = field(default_factory=frozenset)
    transitive: bool = True
    scope: str = SCOPE_COMPILE
    optional: bool = False

    def excludes(self, group: str, module: str) -> bool:
        return any(exclusion.matches(group, module) for exclusion in self.exclusions)


@dataclass(frozen=True)
class ManagedDependency:
    """A coordinate whose version pins later resolutions of the same module."""

    coordinate: DependencyCoordinate
    scope: str = SCOPE_COMPILE

    @property
    def key(self) -> Tuple[str, str]:
        return self.coordinate.key

    @property
    def version(self) -> str:
        return self.coordinate.version


@dataclass(frozen=True)
class ResolvedArtifact:
    coordinate: DependencyCoordinate
    file: Path
    repository_id: Optional[str] = None
