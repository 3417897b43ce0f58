"""Turns parsed grab records into resolvable dependency descriptors."""

from __future__ import annotations

from typing import AbstractSet, Any, Iterable, List, Mapping

from mavengrab.modules.grape.domain import (
    SCOPE_COMPILE,
    WILDCARD_EXCLUSION,
    DependencyDescriptor,
    Exclusion,
    GrabRecord,
)

NON_TRANSITIVE_EXCLUSIONS = frozenset({WILDCARD_EXCLUSION})


class DependencyBuilder:
    """Applies the transitivity policy to a batch of grab records.

    Non-transitive records always carry only the universal wildcard
    exclusion; exclusions declared for the batch are dropped for them.
    """

    def build_one(self, record: GrabRecord, exclusions: AbstractSet[Exclusion]) -> DependencyDescriptor:
        if record.transitive:
            return DependencyDescriptor(
                coordinate=record.coordinate,
                exclusions=frozenset(exclusions),
                transitive=True,
                scope=SCOPE_COMPILE,
            )
        return DependencyDescriptor(
            coordinate=record.coordinate,
            exclusions=NON_TRANSITIVE_EXCLUSIONS,
            transitive=False,
            scope=SCOPE_COMPILE,
        )

    def build(self, records: Iterable[GrabRecord], exclusions: AbstractSet[Exclusion] = frozenset()) -> List[DependencyDescriptor]:
        return [self.build_one(record, exclusions) for record in records]

    def build_from_dicts(
        self,
        records: Iterable[Mapping[str, Any]],
        exclusions: AbstractSet[Exclusion] = frozenset(),
    ) -> List[DependencyDescriptor]:
        """Parse every record before building, so a bad record fails the whole batch."""
        parsed = [GrabRecord.from_dict(record) for record in records]
        return self.build(parsed, exclusions)
