"""Candidate rows and the per-subject units they are folded into.

A candidate row is one identifier observation from a provider batch that
already carries the result of its registry lookup. Rows never reach storage;
they only live for the duration of one reconciliation run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable


type ReconciliationKey = int | str


class CandidatePair(NamedTuple):
    """Distinct ``(identifier, namespace)`` combination evaluated once per unit."""

    identifier: str
    namespace_key: int


@dataclass(frozen=True, slots=True, kw_only=True)
class CandidateRow:
    """One input row annotated with its registry lookup result.

    ``entity_type``/``entity_key`` are both ``None`` when the identifier has no
    registry match.
    """

    reconciliation_key: ReconciliationKey
    identifier: str
    namespace_key: int
    is_subject: bool = False
    entity_type: int | None = None
    entity_key: int | None = None

    def __post_init__(self) -> None:
        if (self.entity_type is None) != (self.entity_key is None):
            raise ValueError(
                "Candidate row must carry both entity type and entity key or neither: "
                f"{self.identifier!r} in namespace {self.namespace_key}"
            )

    @property
    def pair(self) -> CandidatePair:
        return CandidatePair(self.identifier, self.namespace_key)

    @property
    def is_matched(self) -> bool:
        return self.entity_type is not None


@dataclass(frozen=True, slots=True)
class ResolvedEntity:
    """Registry entity identified by its type and key."""

    entity_type: int
    entity_key: int


@dataclass(slots=True)
class ReconciliationUnit:
    """All rows of one reconciliation key, in input order."""

    key: ReconciliationKey
    expected_subject_type: int
    rows: tuple[CandidateRow, ...]
    _distinct_pairs: tuple[CandidatePair, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        for row in self.rows:
            if row.reconciliation_key != self.key:
                raise ValueError(
                    f"Row for key {row.reconciliation_key!r} cannot join unit {self.key!r}"
                )
        self._distinct_pairs = _distinct_pairs(row for row in self.rows if not row.is_subject)

    @property
    def subject_rows(self) -> tuple[CandidateRow, ...]:
        return tuple(row for row in self.rows if row.is_subject)

    @property
    def candidate_rows(self) -> tuple[CandidateRow, ...]:
        return tuple(row for row in self.rows if not row.is_subject)

    @property
    def distinct_pairs(self) -> tuple[CandidatePair, ...]:
        """Non-subject pairs, deduplicated in order of first occurrence."""

        return self._distinct_pairs

    def rows_for(self, pair: CandidatePair) -> tuple[CandidateRow, ...]:
        """Every row of the unit carrying ``pair``, subject rows included."""

        return tuple(row for row in self.rows if row.pair == pair)


def _distinct_pairs(rows: Iterable[CandidateRow]) -> tuple[CandidatePair, ...]:
    seen: set[CandidatePair] = set()
    pairs: list[CandidatePair] = []
    for row in rows:
        pair = row.pair
        if pair in seen:
            continue
        seen.add(pair)
        pairs.append(pair)
    return tuple(pairs)
