"""Shared reconciliation contract components.

This module intentionally holds only:
- count buckets used as decision-table keys
- discrepancy codes and their report messages
- the per-pair outcome vocabulary
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Final


class CountBucket(IntEnum):
    """Registry match count collapsed to none / one / many."""

    NONE = 0
    ONE = 1
    MANY = 2

    @classmethod
    def of(cls, count: int) -> CountBucket:
        if count < 0:
            raise ValueError(f"Match count cannot be negative: {count}")
        return cls(min(count, cls.MANY))

    @property
    def label(self) -> str:
        return ">1" if self is CountBucket.MANY else str(self.value)


class SubjectDiscrepancy(StrEnum):
    """Ways a subject can fail to resolve to exactly one entity of the expected type."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"

    @property
    def message(self) -> str:
        same, different = _SUBJECT_CODE_BUCKETS[self]
        return f"{self.value}: Same type ({same.label}), different type ({different.label})"


class CandidateDiscrepancy(StrEnum):
    """Conflicting registry match patterns for one candidate pair."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"
    M = "M"

    @property
    def message(self) -> str:
        same, same_object, different = _CANDIDATE_CODE_COUNTS[self]
        if same is CountBucket.NONE:
            return f"{self.value}: Same type (0), different type ({different.label})"
        return (
            f"{self.value}: Same type ({same.label}), same object ({int(same_object)}), "
            f"different type ({different.label})"
        )


_SUBJECT_CODE_BUCKETS: Final[dict[SubjectDiscrepancy, tuple[CountBucket, CountBucket]]] = {
    SubjectDiscrepancy.A: (CountBucket.NONE, CountBucket.NONE),
    SubjectDiscrepancy.B: (CountBucket.NONE, CountBucket.ONE),
    SubjectDiscrepancy.C: (CountBucket.NONE, CountBucket.MANY),
    SubjectDiscrepancy.D: (CountBucket.ONE, CountBucket.ONE),
    SubjectDiscrepancy.E: (CountBucket.ONE, CountBucket.MANY),
    SubjectDiscrepancy.F: (CountBucket.MANY, CountBucket.NONE),
    SubjectDiscrepancy.G: (CountBucket.MANY, CountBucket.ONE),
    SubjectDiscrepancy.H: (CountBucket.MANY, CountBucket.MANY),
}

_CANDIDATE_CODE_COUNTS: Final[
    dict[CandidateDiscrepancy, tuple[CountBucket, bool, CountBucket]]
] = {
    CandidateDiscrepancy.A: (CountBucket.NONE, False, CountBucket.ONE),
    CandidateDiscrepancy.B: (CountBucket.NONE, False, CountBucket.MANY),
    CandidateDiscrepancy.C: (CountBucket.ONE, True, CountBucket.ONE),
    CandidateDiscrepancy.D: (CountBucket.ONE, True, CountBucket.MANY),
    CandidateDiscrepancy.E: (CountBucket.ONE, False, CountBucket.NONE),
    CandidateDiscrepancy.F: (CountBucket.ONE, False, CountBucket.ONE),
    CandidateDiscrepancy.G: (CountBucket.ONE, False, CountBucket.MANY),
    CandidateDiscrepancy.H: (CountBucket.MANY, True, CountBucket.NONE),
    CandidateDiscrepancy.I: (CountBucket.MANY, True, CountBucket.ONE),
    CandidateDiscrepancy.J: (CountBucket.MANY, True, CountBucket.MANY),
    CandidateDiscrepancy.K: (CountBucket.MANY, False, CountBucket.NONE),
    CandidateDiscrepancy.L: (CountBucket.MANY, False, CountBucket.ONE),
    CandidateDiscrepancy.M: (CountBucket.MANY, False, CountBucket.MANY),
}


class PairAction(StrEnum):
    """Policy decision on how to materialize one candidate pair."""

    EXISTS = "exists"
    SKIP_WITH_REPORT = "skip_with_report"
    ASSOCIATE = "associate"
    ASSOCIATE_WITH_REPORT = "associate_with_report"


@dataclass(frozen=True, slots=True)
class PairOutcome:
    """Action plus optional discrepancy code for one candidate pair."""

    action: PairAction
    discrepancy: CandidateDiscrepancy | None = None

    def __post_init__(self) -> None:
        reports = self.action in {PairAction.SKIP_WITH_REPORT, PairAction.ASSOCIATE_WITH_REPORT}
        if reports != (self.discrepancy is not None):
            raise ValueError(f"Outcome {self.action} inconsistent with code {self.discrepancy}")

    @property
    def reports(self) -> bool:
        return self.discrepancy is not None

    @property
    def associates(self) -> bool:
        return self.action in {PairAction.ASSOCIATE, PairAction.ASSOCIATE_WITH_REPORT}

    @property
    def blocks_unit(self) -> bool:
        """Whether this outcome suppresses every write in its unit."""

        return self.action is PairAction.SKIP_WITH_REPORT


EXISTS: Final = PairOutcome(PairAction.EXISTS)
ASSOCIATE: Final = PairOutcome(PairAction.ASSOCIATE)


def report_skip(code: CandidateDiscrepancy) -> PairOutcome:
    return PairOutcome(PairAction.SKIP_WITH_REPORT, code)


def report_associate(code: CandidateDiscrepancy) -> PairOutcome:
    return PairOutcome(PairAction.ASSOCIATE_WITH_REPORT, code)


@dataclass(frozen=True, slots=True)
class PairCounts:
    """Registry match counts for one candidate pair relative to the resolved subject."""

    same_type: int = 0
    same_object: int = 0
    different_type: int = 0

    @property
    def key(self) -> tuple[CountBucket, bool, CountBucket]:
        """Decision-table key.

        The same-object count is read as a bit: any match of the subject itself
        sets it, so two or more such rows land on the H/I/J entries. The
        bit only counts with a same-type match.
        """

        same = CountBucket.of(self.same_type)
        same_object = same is not CountBucket.NONE and self.same_object > 0
        return same, same_object, CountBucket.of(self.different_type)
