from .base import ResolutionEngine
from .maven import MavenResolutionEngine, mediate_scope
from .transport import RepositoryTransport
from .versions import MavenVersion, VersionRange, is_dynamic, select_version

__all__ = [
    "ResolutionEngine",
    "MavenResolutionEngine",
    "mediate_scope",
    "RepositoryTransport",
    "MavenVersion",
    "VersionRange",
    "is_dynamic",
    "select_version",
]
