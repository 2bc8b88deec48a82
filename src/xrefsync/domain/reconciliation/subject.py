"""Subject (association target) resolution.

Responsibilities of this stage:
- count subject rows matched to the expected entity type and to other types
- map the bucketed counts onto the subject discrepancy table
- hand the single resolved entity to candidate classification

Unmatched subject rows count toward neither side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from xrefsync.domain.model import ResolvedEntity

from .contracts import CountBucket, SubjectDiscrepancy

if TYPE_CHECKING:
    from xrefsync.domain.model import CandidateRow, ReconciliationUnit

log = logging.getLogger(__name__)

SUBJECT_TABLE: Final[dict[tuple[CountBucket, CountBucket], SubjectDiscrepancy | None]] = {
    (CountBucket.ONE, CountBucket.NONE): None,
    (CountBucket.NONE, CountBucket.NONE): SubjectDiscrepancy.A,
    (CountBucket.NONE, CountBucket.ONE): SubjectDiscrepancy.B,
    (CountBucket.NONE, CountBucket.MANY): SubjectDiscrepancy.C,
    (CountBucket.ONE, CountBucket.ONE): SubjectDiscrepancy.D,
    (CountBucket.ONE, CountBucket.MANY): SubjectDiscrepancy.E,
    (CountBucket.MANY, CountBucket.NONE): SubjectDiscrepancy.F,
    (CountBucket.MANY, CountBucket.ONE): SubjectDiscrepancy.G,
    (CountBucket.MANY, CountBucket.MANY): SubjectDiscrepancy.H,
}


@dataclass(frozen=True, slots=True, kw_only=True)
class SubjectResolution:
    """Outcome of resolving a unit's subject rows.

    Exactly one of ``target``/``discrepancy`` is set. ``subject_row`` is the
    subject row that produced ``target``.
    """

    same_type: int
    different_type: int
    target: ResolvedEntity | None = None
    subject_row: CandidateRow | None = None
    discrepancy: SubjectDiscrepancy | None = None

    @property
    def resolved(self) -> bool:
        return self.target is not None


def subject_discrepancy_for(same_type: int, different_type: int) -> SubjectDiscrepancy | None:
    return SUBJECT_TABLE[CountBucket.of(same_type), CountBucket.of(different_type)]


def resolve_subject(unit: ReconciliationUnit) -> SubjectResolution:
    """Resolve the entity the unit's candidates should be associated with."""

    same_type = 0
    different_type = 0
    match: CandidateRow | None = None
    for row in unit.subject_rows:
        if row.entity_type is None:
            continue
        if row.entity_type == unit.expected_subject_type:
            same_type += 1
            match = row
        else:
            different_type += 1

    discrepancy = subject_discrepancy_for(same_type, different_type)
    if discrepancy is not None:
        log.debug(
            "Subject discrepancy for key=%s: same_type=%s different_type=%s code=%s",
            unit.key,
            same_type,
            different_type,
            discrepancy,
        )
        return SubjectResolution(
            same_type=same_type,
            different_type=different_type,
            discrepancy=discrepancy,
        )
    if match is None or match.entity_key is None:  # pragma: no cover - table guarantees a match
        raise RuntimeError(f"Subject for key {unit.key!r} resolved without a matched row")

    return SubjectResolution(
        same_type=same_type,
        different_type=different_type,
        target=ResolvedEntity(unit.expected_subject_type, match.entity_key),
        subject_row=match,
    )
