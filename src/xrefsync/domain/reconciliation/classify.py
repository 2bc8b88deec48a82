"""Candidate pair classification.

Responsibilities of this stage:
- count how a candidate pair already matches the registry relative to the
  resolved subject (same type, same object, different type)
- look the bucketed counts up in the decision table of the pair's namespace
  cardinality

Both tables are plain data keyed by ``(same type, same object, different type)``.
Keys with no same-type match never carry the same-object bit.

The multiple-association table ignores the different-type count when there is
no same-type match.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from xrefsync.domain.model import AssociationCardinality

from .contracts import (
    ASSOCIATE,
    EXISTS,
    CandidateDiscrepancy,
    CountBucket,
    PairCounts,
    PairOutcome,
    report_associate,
    report_skip,
)

if TYPE_CHECKING:
    from xrefsync.domain.model import CandidatePair, ReconciliationUnit, ResolvedEntity

    from .policy import NamespacePolicy

log = logging.getLogger(__name__)

type DecisionKey = tuple[CountBucket, bool, CountBucket]
type DecisionTable = dict[DecisionKey, PairOutcome]

_NONE = CountBucket.NONE
_ONE = CountBucket.ONE
_MANY = CountBucket.MANY
_D = CandidateDiscrepancy

SINGLE_ASSOCIATION_TABLE: Final[DecisionTable] = {
    (_NONE, False, _NONE): ASSOCIATE,
    (_NONE, False, _ONE): report_skip(_D.A),
    (_NONE, False, _MANY): report_skip(_D.B),
    (_ONE, True, _NONE): EXISTS,
    (_ONE, True, _ONE): report_skip(_D.C),
    (_ONE, True, _MANY): report_skip(_D.D),
    (_ONE, False, _NONE): report_skip(_D.E),
    (_ONE, False, _ONE): report_skip(_D.F),
    (_ONE, False, _MANY): report_skip(_D.G),
    (_MANY, True, _NONE): report_skip(_D.H),
    (_MANY, True, _ONE): report_skip(_D.I),
    (_MANY, True, _MANY): report_skip(_D.J),
    (_MANY, False, _NONE): report_skip(_D.K),
    (_MANY, False, _ONE): report_skip(_D.L),
    (_MANY, False, _MANY): report_skip(_D.M),
}

MULTIPLE_ASSOCIATION_TABLE: Final[DecisionTable] = {
    (_NONE, False, _NONE): ASSOCIATE,
    (_NONE, False, _ONE): ASSOCIATE,
    (_NONE, False, _MANY): ASSOCIATE,
    (_ONE, True, _NONE): EXISTS,
    (_ONE, True, _ONE): EXISTS,
    (_ONE, True, _MANY): EXISTS,
    (_ONE, False, _NONE): report_associate(_D.E),
    (_ONE, False, _ONE): report_associate(_D.F),
    (_ONE, False, _MANY): report_associate(_D.G),
    (_MANY, True, _NONE): report_skip(_D.H),
    (_MANY, True, _ONE): report_skip(_D.I),
    (_MANY, True, _MANY): report_skip(_D.J),
    (_MANY, False, _NONE): report_associate(_D.K),
    (_MANY, False, _ONE): report_associate(_D.L),
    (_MANY, False, _MANY): report_associate(_D.M),
}

DECISION_TABLES: Final[dict[AssociationCardinality, DecisionTable]] = {
    AssociationCardinality.SINGLE: SINGLE_ASSOCIATION_TABLE,
    AssociationCardinality.MULTIPLE: MULTIPLE_ASSOCIATION_TABLE,
}


def count_pair(
    unit: ReconciliationUnit,
    pair: CandidatePair,
    *,
    target: ResolvedEntity,
) -> PairCounts:
    """Count the registry matches of every unit row carrying ``pair``."""

    same_type = 0
    same_object = 0
    different_type = 0
    for row in unit.rows_for(pair):
        if row.entity_type is None:
            continue
        if row.entity_type == target.entity_type:
            same_type += 1
            if row.entity_key == target.entity_key:
                same_object += 1
        else:
            different_type += 1
    counts = PairCounts(same_type, same_object, different_type)
    log.debug(
        "Counts for %s/%s: same_type=%s different_type=%s same_object=%s",
        pair.identifier,
        pair.namespace_key,
        same_type,
        different_type,
        same_object,
    )
    return counts


def classify_counts(counts: PairCounts, cardinality: AssociationCardinality) -> PairOutcome:
    return DECISION_TABLES[cardinality][counts.key]


def classify_pair(
    unit: ReconciliationUnit,
    pair: CandidatePair,
    *,
    target: ResolvedEntity,
    policy: NamespacePolicy,
) -> tuple[PairCounts, PairOutcome]:
    """Classify one distinct pair of ``unit`` against the resolved ``target``."""

    cardinality = policy.cardinality_for(pair.namespace_key)
    counts = count_pair(unit, pair, target=target)
    return counts, classify_counts(counts, cardinality)
