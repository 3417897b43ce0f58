from .constants import (
    DEFAULT_LAYOUT,
    DEFAULT_PACKAGING,
    SCOPE_COMPILE,
    SCOPE_IMPORT,
    SCOPE_PROVIDED,
    SCOPE_RUNTIME,
    SCOPE_SYSTEM,
    SCOPE_TEST,
    WILDCARD,
)
from .coordinates import (
    WILDCARD_EXCLUSION,
    DependencyCoordinate,
    DependencyDescriptor,
    Exclusion,
    ManagedDependency,
    ResolvedArtifact,
)
from .records import GrabRecord, parse_dependency, parse_exclusion, parse_exclusions
from .repository import ProxyConfig, Repository
from .requests import CollectRequest, DependencyResult, ScopeFilter, classpath_filter
from .transfer import TransferEvent, TransferKind

__all__ = [
    "DEFAULT_LAYOUT",
    "DEFAULT_PACKAGING",
    "SCOPE_COMPILE",
    "SCOPE_IMPORT",
    "SCOPE_PROVIDED",
    "SCOPE_RUNTIME",
    "SCOPE_SYSTEM",
    "SCOPE_TEST",
    "WILDCARD",
    "WILDCARD_EXCLUSION",
    "DependencyCoordinate",
    "DependencyDescriptor",
    "Exclusion",
    "ManagedDependency",
    "ResolvedArtifact",
    "GrabRecord",
    "parse_dependency",
    "parse_exclusion",
    "parse_exclusions",
    "ProxyConfig",
    "Repository",
    "CollectRequest",
    "DependencyResult",
    "ScopeFilter",
    "classpath_filter",
    "TransferEvent",
    "TransferKind",
]
