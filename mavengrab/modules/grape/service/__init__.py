from .builder import DependencyBuilder
from .classpath import ClassPath
from .coordinator import ResolutionCoordinator
from .engine import GrapeEngine
from .managed import ManagedDependencySet

__all__ = [
    "DependencyBuilder",
    "ClassPath",
    "ResolutionCoordinator",
    "GrapeEngine",
    "ManagedDependencySet",
]
