"""Maven-style version ordering, ranges and dynamic version selection."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from mavengrab.modules.grape.exceptions import VersionResolutionError

_Item = Union[int, str]

_QUALIFIER_ALIASES = {"a": "alpha", "b": "beta", "m": "milestone", "cr": "rc", "ga": "", "final": "", "release": ""}
_QUALIFIER_ORDER = ["alpha", "beta", "milestone", "rc", "snapshot", "", "sp"]
_TOKEN_RE = re.compile(r"\d+|[a-z]+")

LATEST_KEYWORDS = frozenset({"*", "+", "latest.integration", "LATEST"})
RELEASE_KEYWORDS = frozenset({"latest.release", "RELEASE"})


def _tokenize(text: str) -> List[_Item]:
    items: List[_Item] = []
    for part in re.split(r"[.\-_]", text.lower()):
        if not part:
            continue
        for token in _TOKEN_RE.findall(part):
            items.append(int(token) if token.isdigit() else token)
    return items


def _qualifier_key(text: str) -> Tuple[int, str]:
    text = _QUALIFIER_ALIASES.get(text, text)
    if text in _QUALIFIER_ORDER:
        return (_QUALIFIER_ORDER.index(text), "")
    return (len(_QUALIFIER_ORDER), text)


def _compare_items(a: Optional[_Item], b: Optional[_Item]) -> int:
    if a is None:
        a = 0 if isinstance(b, int) else ""
    if b is None:
        b = 0 if isinstance(a, int) else ""
    if isinstance(a, int) and isinstance(b, int):
        return (a > b) - (a < b)
    if isinstance(a, int):
        return 1
    if isinstance(b, int):
        return -1
    ka, kb = _qualifier_key(a), _qualifier_key(b)
    return (ka > kb) - (ka < kb)


@functools.total_ordering
class MavenVersion:
    """Comparable version: numbers compare numerically, qualifiers by release stage."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.items = _tokenize(text)

    def _normalized(self) -> Tuple[_Item, ...]:
        items = list(self.items)
        while items and items[-1] in (0, "", "ga", "final", "release"):
            items.pop()
        return tuple(items)

    def compare(self, other: "MavenVersion") -> int:
        length = max(len(self.items), len(other.items))
        for index in range(length):
            a = self.items[index] if index < len(self.items) else None
            b = other.items[index] if index < len(other.items) else None
            result = _compare_items(a, b)
            if result:
                return result
        return 0

    @property
    def is_snapshot(self) -> bool:
        return self.text.upper().endswith("SNAPSHOT")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "MavenVersion") -> bool:
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self._normalized())

    def __repr__(self) -> str:
        return f"MavenVersion({self.text!r})"


@dataclass(frozen=True)
class _Bound:
    lower: Optional[MavenVersion]
    lower_inclusive: bool
    upper: Optional[MavenVersion]
    upper_inclusive: bool

    def contains(self, version: MavenVersion) -> bool:
        if self.lower is not None:
            result = version.compare(self.lower)
            if result < 0 or (result == 0 and not self.lower_inclusive):
                return False
        if self.upper is not None:
            result = version.compare(self.upper)
            if result > 0 or (result == 0 and not self.upper_inclusive):
                return False
        return True


_RANGE_RE = re.compile(r"([\[(])([^\[\]()]*)([\])])")


class VersionRange:
    """Maven range such as ``[1.0,2.0)``, ``[1.5,)`` or ``[1.0,1.2),(1.2,)``."""

    def __init__(self, spec: str) -> None:
        self.spec = spec
        self.bounds: List[_Bound] = []
        remainder = _RANGE_RE.sub("", spec).replace(",", "").strip()
        if remainder:
            raise VersionResolutionError(f"Invalid version range: {spec}")
        for opening, body, closing in _RANGE_RE.findall(spec):
            self.bounds.append(self._parse_bound(opening, body, closing))
        if not self.bounds:
            raise VersionResolutionError(f"Invalid version range: {spec}")

    def _parse_bound(self, opening: str, body: str, closing: str) -> _Bound:
        if "," not in body:
            if opening != "[" or closing != "]" or not body.strip():
                raise VersionResolutionError(f"Invalid version range: {self.spec}")
            exact = MavenVersion(body.strip())
            return _Bound(exact, True, exact, True)
        low, high = (part.strip() for part in body.split(",", 1))
        return _Bound(
            MavenVersion(low) if low else None,
            opening == "[",
            MavenVersion(high) if high else None,
            closing == "]",
        )

    def contains(self, version: Union[str, MavenVersion]) -> bool:
        if isinstance(version, str):
            version = MavenVersion(version)
        return any(bound.contains(version) for bound in self.bounds)


def is_range(version: str) -> bool:
    return version[:1] in ("[", "(")


def is_dynamic(version: str) -> bool:
    return (
        version in LATEST_KEYWORDS
        or version in RELEASE_KEYWORDS
        or version.endswith(".+")
        or is_range(version)
    )


def select_version(spec: str, available: Iterable[str]) -> str:
    """Pick the highest available version satisfying ``spec``."""
    candidates = [MavenVersion(v) for v in dict.fromkeys(available)]
    if spec in LATEST_KEYWORDS:
        matching = candidates
    elif spec in RELEASE_KEYWORDS:
        matching = [v for v in candidates if not v.is_snapshot]
    elif spec.endswith(".+"):
        prefix = spec[:-1]
        matching = [v for v in candidates if v.text.startswith(prefix)]
    elif is_range(spec):
        version_range = VersionRange(spec)
        matching = [v for v in candidates if version_range.contains(v)]
    else:
        matching = [v for v in candidates if v == MavenVersion(spec)]
    if not matching:
        raise VersionResolutionError(f"No version matching '{spec}' among {[v.text for v in candidates]}")
    return max(matching).text
