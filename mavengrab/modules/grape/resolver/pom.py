"""Parsing and inheritance of Maven POM descriptors."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from mavengrab.modules.grape.domain import DEFAULT_PACKAGING, DependencyCoordinate, Exclusion
from mavengrab.modules.grape.exceptions import ArtifactDescriptorError

_PROP_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_INTERPOLATION_PASSES = 10

# dependency type -> (file extension, implied classifier)
_ARTIFACT_HANDLERS: Dict[str, Tuple[str, str]] = {
    "pom": ("pom", ""),
    "jar": ("jar", ""),
    "bundle": ("jar", ""),
    "maven-plugin": ("jar", ""),
    "ejb": ("jar", ""),
    "ejb-client": ("jar", "client"),
    "test-jar": ("jar", "tests"),
    "java-source": ("jar", "sources"),
    "javadoc": ("jar", "javadoc"),
    "war": ("war", ""),
    "ear": ("ear", ""),
    "rar": ("rar", ""),
}


def artifact_handler(dependency_type: str) -> Tuple[str, str]:
    """Extension and default classifier for a POM ``<type>``; unknown types are their own extension."""
    return _ARTIFACT_HANDLERS.get(dependency_type, (dependency_type, ""))


def _local(tag: str) -> str:
    return tag.split("}", 1)[1] if "}" in tag else tag


def _child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if element is None:
        return None
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: Optional[ET.Element], name: str) -> List[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _text(element: Optional[ET.Element], name: str) -> Optional[str]:
    node = _child(element, name)
    if node is None or node.text is None:
        return None
    value = node.text.strip()
    return value or None


def interpolate(value: Optional[str], props: Dict[str, str]) -> Optional[str]:
    """Replace ${property} placeholders; unknown ones are kept verbatim."""
    if value is None:
        return None
    for _ in range(_MAX_INTERPOLATION_PASSES):
        replaced = _PROP_RE.sub(lambda m: props.get(m.group(1), m.group(0)), value)
        if replaced == value:
            break
        value = replaced
    return value


@dataclass(frozen=True)
class PomDependency:
    group: str
    module: str
    version: Optional[str] = None
    type: str = DEFAULT_PACKAGING
    classifier: str = ""
    scope: Optional[str] = None
    optional: bool = False
    exclusions: FrozenSet[Exclusion] = field(default_factory=frozenset)

    @property
    def management_key(self) -> Tuple[str, str, str, str]:
        return (self.group, self.module, self.type, self.classifier)

    def coordinate(self, version: str) -> DependencyCoordinate:
        extension, implied_classifier = artifact_handler(self.type)
        return DependencyCoordinate(self.group, self.module, version, extension, self.classifier or implied_classifier)

    def interpolated(self, props: Dict[str, str]) -> "PomDependency":
        return replace(
            self,
            group=interpolate(self.group, props) or self.group,
            module=interpolate(self.module, props) or self.module,
            version=interpolate(self.version, props),
            type=interpolate(self.type, props) or DEFAULT_PACKAGING,
            classifier=interpolate(self.classifier, props) or "",
            scope=interpolate(self.scope, props),
        )


@dataclass
class RawPom:
    """A single POM file as written, before inheritance and interpolation."""

    module: str
    group: Optional[str] = None
    version: Optional[str] = None
    packaging: str = DEFAULT_PACKAGING
    parent: Optional[DependencyCoordinate] = None
    properties: Dict[str, str] = field(default_factory=dict)
    dependencies: List[PomDependency] = field(default_factory=list)
    managed: List[PomDependency] = field(default_factory=list)


@dataclass
class EffectivePom:
    coordinate: DependencyCoordinate
    packaging: str
    properties: Dict[str, str]
    dependencies: List[PomDependency]
    managed: Dict[Tuple[str, str, str, str], PomDependency]


def _parse_dependency(element: ET.Element) -> Optional[PomDependency]:
    group = _text(element, "groupId")
    module = _text(element, "artifactId")
    if not group or not module:
        return None
    exclusions = frozenset(
        Exclusion(_text(node, "groupId") or "*", _text(node, "artifactId") or "*")
        for node in _children(_child(element, "exclusions"), "exclusion")
    )
    return PomDependency(
        group=group,
        module=module,
        version=_text(element, "version"),
        type=_text(element, "type") or DEFAULT_PACKAGING,
        classifier=_text(element, "classifier") or "",
        scope=_text(element, "scope"),
        optional=(_text(element, "optional") or "false").lower() == "true",
        exclusions=exclusions,
    )


def _parse_dependencies(container: Optional[ET.Element]) -> List[PomDependency]:
    parsed = (_parse_dependency(node) for node in _children(_child(container, "dependencies"), "dependency"))
    return [dep for dep in parsed if dep is not None]


def parse_pom(content: bytes, source: str = "pom.xml") -> RawPom:
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise ArtifactDescriptorError(f"Malformed POM {source}: {exc}") from exc
    if _local(root.tag) != "project":
        raise ArtifactDescriptorError(f"{source} is not a POM (root element {_local(root.tag)!r})")

    module = _text(root, "artifactId")
    if not module:
        raise ArtifactDescriptorError(f"POM {source} has no artifactId")

    parent = None
    parent_el = _child(root, "parent")
    if parent_el is not None:
        parent_group = _text(parent_el, "groupId")
        parent_module = _text(parent_el, "artifactId")
        parent_version = _text(parent_el, "version")
        if not (parent_group and parent_module and parent_version):
            raise ArtifactDescriptorError(f"POM {source} declares an incomplete parent")
        parent = DependencyCoordinate(parent_group, parent_module, parent_version, "pom")

    properties: Dict[str, str] = {}
    properties_el = _child(root, "properties")
    for node in (list(properties_el) if properties_el is not None else []):
        properties[_local(node.tag)] = (node.text or "").strip()

    return RawPom(
        module=module,
        group=_text(root, "groupId"),
        version=_text(root, "version"),
        packaging=_text(root, "packaging") or DEFAULT_PACKAGING,
        parent=parent,
        properties=properties,
        dependencies=_parse_dependencies(root),
        managed=_parse_dependencies(_child(root, "dependencyManagement")),
    )


def build_effective_pom(
    raw: RawPom,
    parent: Optional[EffectivePom] = None,
    imports: Iterable[EffectivePom] = (),
) -> EffectivePom:
    """Merge ``raw`` with its parent, interpolate, and apply dependency management.

    ``imports`` are the effective POMs of ``import``-scoped BOMs; their
    managed entries rank below the POM's own and its parent's.
    """
    group = raw.group or (raw.parent.group if raw.parent else None)
    version = raw.version or (raw.parent.version if raw.parent else None)
    if not group or not version:
        raise ArtifactDescriptorError(f"POM for {raw.module} lacks groupId or version")

    props: Dict[str, str] = dict(parent.properties) if parent else {}
    props.update(raw.properties)
    project = {
        "groupId": group,
        "artifactId": raw.module,
        "version": version,
        "packaging": raw.packaging,
    }
    for key, value in project.items():
        props[f"project.{key}"] = value
        props[f"pom.{key}"] = value
        props.setdefault(key, value)
    if raw.parent:
        props["project.parent.groupId"] = raw.parent.group
        props["project.parent.artifactId"] = raw.parent.module
        props["project.parent.version"] = raw.parent.version
        props["parent.version"] = raw.parent.version

    managed: Dict[Tuple[str, str, str, str], PomDependency] = {}
    for bom in imports:
        for key, dep in bom.managed.items():
            managed.setdefault(key, dep)
    if parent:
        managed.update(parent.managed)
    for dep in raw.managed:
        dep = dep.interpolated(props)
        if dep.scope == "import":
            continue
        managed[dep.management_key] = dep

    inherited = list(parent.dependencies) if parent else []
    own = [_apply_management(dep.interpolated(props), managed) for dep in raw.dependencies]
    own_keys = {dep.management_key for dep in own}
    dependencies = [dep for dep in inherited if dep.management_key not in own_keys] + own

    return EffectivePom(
        coordinate=DependencyCoordinate(group, raw.module, version, "pom"),
        packaging=raw.packaging,
        properties=props,
        dependencies=dependencies,
        managed=managed,
    )


def import_declarations(raw: RawPom, parent: Optional[EffectivePom] = None) -> List[DependencyCoordinate]:
    """BOM coordinates declared with ``<scope>import</scope>``, interpolated."""
    props: Dict[str, str] = dict(parent.properties) if parent else {}
    props.update(raw.properties)
    group = raw.group or (raw.parent.group if raw.parent else "")
    version = raw.version or (raw.parent.version if raw.parent else "")
    props.setdefault("project.groupId", group or "")
    props.setdefault("project.version", version or "")
    if raw.parent:
        props.setdefault("project.parent.version", raw.parent.version)
    declared = []
    for dep in raw.managed:
        dep = dep.interpolated(props)
        if dep.scope == "import" and dep.type == "pom" and dep.version:
            declared.append(DependencyCoordinate(dep.group, dep.module, dep.version, "pom"))
    return declared


def _apply_management(
    dep: PomDependency,
    managed: Dict[Tuple[str, str, str, str], PomDependency],
) -> PomDependency:
    entry = managed.get(dep.management_key)
    if entry is None:
        return dep
    return replace(
        dep,
        version=dep.version or entry.version,
        scope=dep.scope or entry.scope,
        exclusions=dep.exclusions or entry.exclusions,
    )


def parse_metadata_versions(content: bytes, source: str = "maven-metadata.xml") -> List[str]:
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise ArtifactDescriptorError(f"Malformed metadata {source}: {exc}") from exc
    versioning = _child(root, "versioning")
    versions = [
        node.text.strip()
        for node in _children(_child(versioning, "versions"), "version")
        if node.text and node.text.strip()
    ]
    if not versions:
        fallback = _text(versioning, "release") or _text(versioning, "latest") or _text(root, "version")
        if fallback:
            versions.append(fallback)
    return versions
