"""Errors raised by the grape resolution core and the Maven resolver."""

from __future__ import annotations

from typing import Optional, Sequence


class GrapeError(Exception):
    """Base class for every error surfaced by mavengrab."""


class InvalidCoordinateError(GrapeError, ValueError):
    """A dependency or exclusion record is missing a required field."""

    def __init__(self, message: str, record: Optional[object] = None) -> None:
        super().__init__(message)
        self.record = record


class DependencyResolutionFailedError(GrapeError):
    """Wraps any failure of the resolution engine or of load path updates."""

    def __init__(self, cause: BaseException, message: Optional[str] = None) -> None:
        super().__init__(message or f"Dependency resolution failed: {cause}")
        self.cause = cause


class UnsupportedOperationError(GrapeError, NotImplementedError):
    """Capability of the grape contract this engine deliberately does not offer."""


class ResolutionEngineError(GrapeError):
    """Failure inside the collect/resolve engine."""


class ArtifactNotFoundError(ResolutionEngineError):
    """No repository could supply a resource.

    ``errors`` lists the repositories that failed with a transport error
    rather than a plain miss.
    """

    def __init__(self, resource: str, attempts: Sequence[str] = (), errors: Sequence[str] = ()) -> None:
        detail = "; ".join(attempts) if attempts else "no repositories configured"
        super().__init__(f"Could not find {resource} ({detail})")
        self.resource = resource
        self.attempts = list(attempts)
        self.errors = list(errors)


class ArtifactDescriptorError(ResolutionEngineError):
    """A POM could not be parsed or its parent chain is broken."""


class VersionResolutionError(ResolutionEngineError):
    """No available version satisfies a dynamic version or range."""


class InvalidRepositoryError(GrapeError, ValueError):
    """A repository declaration is missing its id, name or root url."""
