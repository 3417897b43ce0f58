"""Parsing of loosely-typed grab records into typed coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional

from mavengrab.modules.grape.exceptions import InvalidCoordinateError

from .constants import DEFAULT_PACKAGING
from .coordinates import DependencyCoordinate, Exclusion


def _required(record: Mapping[str, Any], key: str, kind: str = "dependency") -> str:
    value = record.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    if value is not None and not isinstance(value, str):
        raise InvalidCoordinateError(
            f"Field '{key}' of {kind} must be a string, got {type(value).__name__}", record
        )
    raise InvalidCoordinateError(f"Missing required {kind} field '{key}'", record)


def _optional(record: Mapping[str, Any], *keys: str, default: str = "") -> str:
    for key in keys:
        value = record.get(key)
        if value is not None:
            text = str(value).strip()
            if text:
                return text
    return default


def _transitive(record: Mapping[str, Any]) -> bool:
    value = record.get("transitive")
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidCoordinateError(f"'transitive' must be a boolean, got {value!r}", record)


def _ensure_mapping(record: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(record, Mapping):
        raise InvalidCoordinateError(f"{kind} record must be a mapping, got {type(record).__name__}", record)
    return record


@dataclass(frozen=True)
class GrabRecord:
    """One requested artifact plus its transitivity flag."""

    coordinate: DependencyCoordinate
    transitive: bool = True

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "GrabRecord":
        record = _ensure_mapping(record, "dependency")
        coordinate = DependencyCoordinate(
            group=_required(record, "group"),
            module=_required(record, "module"),
            version=_required(record, "version"),
            packaging=_optional(record, "ext", "type", "packaging", default=DEFAULT_PACKAGING).lstrip("."),
            classifier=_optional(record, "classifier"),
        )
        return cls(coordinate=coordinate, transitive=_transitive(record))


def parse_dependency(record: Mapping[str, Any]) -> GrabRecord:
    return GrabRecord.from_dict(record)


def parse_exclusion(record: Mapping[str, Any]) -> Exclusion:
    record = _ensure_mapping(record, "exclusion")
    return Exclusion(
        group=_required(record, "group", kind="exclusion"),
        module=_required(record, "module", kind="exclusion"),
    )


def parse_exclusions(args: Optional[Mapping[str, Any]]) -> FrozenSet[Exclusion]:
    """Read the optional ``excludes`` list of a grab call."""
    if not args:
        return frozenset()
    entries = args.get("excludes")
    if entries is None:
        return frozenset()
    if isinstance(entries, Mapping):
        entries = [entries]
    if not isinstance(entries, (list, tuple)):
        raise InvalidCoordinateError("'excludes' must be a list of exclusion records", args)
    return frozenset(parse_exclusion(entry) for entry in entries)
