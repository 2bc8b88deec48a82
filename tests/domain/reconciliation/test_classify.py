from __future__ import annotations

import pytest

from xrefsync.domain.model import AssociationCardinality, CandidatePair, ResolvedEntity
from xrefsync.domain.reconciliation import (
    MULTIPLE_ASSOCIATION_TABLE,
    SINGLE_ASSOCIATION_TABLE,
    CandidateDiscrepancy,
    CountBucket,
    NamespacePolicy,
    PairAction,
    PairCounts,
    PairOutcome,
    classify_counts,
    classify_pair,
    count_pair,
)
from tests.helpers.associations import (
    MARKER_TYPE,
    MULTIPLE_NAMESPACE,
    SEQUENCE_TYPE,
    SINGLE_NAMESPACE,
    SUBJECT_KEY,
    candidate_row,
    make_unit,
    subject_row,
)

_SKIP = PairAction.SKIP_WITH_REPORT
_ASSOCIATE_REPORT = PairAction.ASSOCIATE_WITH_REPORT

TARGET = ResolvedEntity(MARKER_TYPE, SUBJECT_KEY)


@pytest.mark.parametrize(
    ("counts", "action", "code"),
    [
        (PairCounts(0, 0, 0), PairAction.ASSOCIATE, None),
        (PairCounts(0, 0, 1), _SKIP, CandidateDiscrepancy.A),
        (PairCounts(0, 0, 3), _SKIP, CandidateDiscrepancy.B),
        (PairCounts(1, 1, 0), PairAction.EXISTS, None),
        (PairCounts(1, 1, 1), _SKIP, CandidateDiscrepancy.C),
        (PairCounts(1, 1, 2), _SKIP, CandidateDiscrepancy.D),
        (PairCounts(1, 0, 0), _SKIP, CandidateDiscrepancy.E),
        (PairCounts(1, 0, 1), _SKIP, CandidateDiscrepancy.F),
        (PairCounts(1, 0, 2), _SKIP, CandidateDiscrepancy.G),
        (PairCounts(2, 1, 0), _SKIP, CandidateDiscrepancy.H),
        (PairCounts(2, 1, 1), _SKIP, CandidateDiscrepancy.I),
        (PairCounts(3, 1, 2), _SKIP, CandidateDiscrepancy.J),
        (PairCounts(2, 0, 0), _SKIP, CandidateDiscrepancy.K),
        (PairCounts(2, 0, 1), _SKIP, CandidateDiscrepancy.L),
        (PairCounts(2, 0, 5), _SKIP, CandidateDiscrepancy.M),
    ],
)
def test_single_association_decisions(
    counts: PairCounts, action: PairAction, code: CandidateDiscrepancy | None
) -> None:
    outcome = classify_counts(counts, AssociationCardinality.SINGLE)

    assert outcome == PairOutcome(action, code)


@pytest.mark.parametrize(
    ("counts", "action", "code"),
    [
        (PairCounts(0, 0, 0), PairAction.ASSOCIATE, None),
        (PairCounts(0, 0, 1), PairAction.ASSOCIATE, None),
        (PairCounts(0, 0, 4), PairAction.ASSOCIATE, None),
        (PairCounts(1, 1, 0), PairAction.EXISTS, None),
        (PairCounts(1, 1, 1), PairAction.EXISTS, None),
        (PairCounts(1, 1, 2), PairAction.EXISTS, None),
        (PairCounts(1, 0, 0), _ASSOCIATE_REPORT, CandidateDiscrepancy.E),
        (PairCounts(1, 0, 1), _ASSOCIATE_REPORT, CandidateDiscrepancy.F),
        (PairCounts(1, 0, 2), _ASSOCIATE_REPORT, CandidateDiscrepancy.G),
        (PairCounts(2, 1, 0), _SKIP, CandidateDiscrepancy.H),
        (PairCounts(2, 1, 1), _SKIP, CandidateDiscrepancy.I),
        (PairCounts(2, 1, 2), _SKIP, CandidateDiscrepancy.J),
        (PairCounts(2, 0, 0), _ASSOCIATE_REPORT, CandidateDiscrepancy.K),
        (PairCounts(2, 0, 1), _ASSOCIATE_REPORT, CandidateDiscrepancy.L),
        (PairCounts(4, 0, 3), _ASSOCIATE_REPORT, CandidateDiscrepancy.M),
    ],
)
def test_multiple_association_decisions(
    counts: PairCounts, action: PairAction, code: CandidateDiscrepancy | None
) -> None:
    outcome = classify_counts(counts, AssociationCardinality.MULTIPLE)

    assert outcome == PairOutcome(action, code)


def test_decision_tables_cover_every_key() -> None:
    buckets = list(CountBucket)
    expected_keys = {(CountBucket.NONE, False, diff) for diff in buckets} | {
        (same, same_object, diff)
        for same in (CountBucket.ONE, CountBucket.MANY)
        for same_object in (True, False)
        for diff in buckets
    }

    assert set(SINGLE_ASSOCIATION_TABLE) == expected_keys
    assert set(MULTIPLE_ASSOCIATION_TABLE) == expected_keys


def test_same_object_bit_ignored_without_same_type_match() -> None:
    assert PairCounts(0, 3, 0).key == (CountBucket.NONE, False, CountBucket.NONE)
    assert PairCounts(2, 2, 0).key == (CountBucket.MANY, True, CountBucket.NONE)


def test_repeated_subject_match_reports_and_skips() -> None:
    outcome = classify_counts(PairCounts(2, 2, 0), AssociationCardinality.SINGLE)

    assert outcome == PairOutcome(_SKIP, CandidateDiscrepancy.H)


def test_count_pair_scans_every_row_of_the_pair() -> None:
    pair = CandidatePair("AB000001", SINGLE_NAMESPACE)
    unit = make_unit(
        subject_row(),
        candidate_row(identifier="AB000001", entity=(MARKER_TYPE, SUBJECT_KEY)),
        candidate_row(identifier="AB000001", entity=(MARKER_TYPE, 55)),
        candidate_row(identifier="AB000001", entity=(SEQUENCE_TYPE, 7)),
        candidate_row(identifier="AB000002", entity=(SEQUENCE_TYPE, 8)),
        candidate_row(identifier="AB000001", namespace_key=MULTIPLE_NAMESPACE, entity=(9, 9)),
    )

    assert count_pair(unit, pair, target=TARGET) == PairCounts(2, 1, 1)


def test_unmatched_rows_do_not_count() -> None:
    pair = CandidatePair("AB000001", SINGLE_NAMESPACE)
    unit = make_unit(subject_row(), candidate_row(identifier="AB000001"))

    assert count_pair(unit, pair, target=TARGET) == PairCounts(0, 0, 0)


def test_classify_pair_uses_namespace_cardinality() -> None:
    policy = NamespacePolicy.of(single=[SINGLE_NAMESPACE], multiple=[MULTIPLE_NAMESPACE])
    unit = make_unit(
        subject_row(),
        candidate_row(identifier="X", namespace_key=SINGLE_NAMESPACE, entity=(MARKER_TYPE, 3)),
        candidate_row(identifier="X", namespace_key=MULTIPLE_NAMESPACE, entity=(MARKER_TYPE, 3)),
    )

    single_counts, single = classify_pair(
        unit, CandidatePair("X", SINGLE_NAMESPACE), target=TARGET, policy=policy
    )
    _counts, multiple = classify_pair(
        unit, CandidatePair("X", MULTIPLE_NAMESPACE), target=TARGET, policy=policy
    )

    assert single_counts == PairCounts(1, 0, 0)
    assert single == PairOutcome(_SKIP, CandidateDiscrepancy.E)
    assert multiple == PairOutcome(_ASSOCIATE_REPORT, CandidateDiscrepancy.E)


def test_candidate_messages() -> None:
    assert CandidateDiscrepancy.A.message == "A: Same type (0), different type (1)"
    assert CandidateDiscrepancy.C.message == (
        "C: Same type (1), same object (1), different type (1)"
    )
    assert CandidateDiscrepancy.M.message == (
        "M: Same type (>1), same object (0), different type (>1)"
    )


def test_outcome_rejects_inconsistent_code() -> None:
    with pytest.raises(ValueError, match="inconsistent"):
        PairOutcome(PairAction.ASSOCIATE, CandidateDiscrepancy.A)
    with pytest.raises(ValueError, match="inconsistent"):
        PairOutcome(PairAction.SKIP_WITH_REPORT)


def test_count_bucket_rejects_negative_counts() -> None:
    with pytest.raises(ValueError, match="negative"):
        CountBucket.of(-1)
