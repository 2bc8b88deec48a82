"""Reconciliation core for merging external identifier associations into the registry.

Layered flow:
1) fold key-contiguous candidate rows into reconciliation units
2) resolve each unit's subject to one registry entity
3) classify every distinct candidate pair by namespace cardinality
4) report discrepancies and emit associations/auxiliary links to the sink
"""

from __future__ import annotations

from .classify import (
    MULTIPLE_ASSOCIATION_TABLE,
    SINGLE_ASSOCIATION_TABLE,
    classify_counts,
    classify_pair,
    count_pair,
)
from .contracts import (
    CandidateDiscrepancy,
    CountBucket,
    PairAction,
    PairCounts,
    PairOutcome,
    SubjectDiscrepancy,
)
from .engine import (
    PairDecision,
    ReconciliationCounters,
    ReconciliationEngine,
    UnitResult,
)
from .grouping import NonContiguousKeyError, build_units
from .link_cache import AuxiliaryLinkCache
from .policy import (
    NamespacePolicy,
    NamespacePolicyError,
    OverlappingNamespaceError,
    UnclassifiedNamespaceError,
)
from .subject import SubjectResolution, resolve_subject

__all__ = [
    "MULTIPLE_ASSOCIATION_TABLE",
    "SINGLE_ASSOCIATION_TABLE",
    "AuxiliaryLinkCache",
    "CandidateDiscrepancy",
    "CountBucket",
    "NamespacePolicy",
    "NamespacePolicyError",
    "NonContiguousKeyError",
    "OverlappingNamespaceError",
    "PairAction",
    "PairCounts",
    "PairDecision",
    "PairOutcome",
    "ReconciliationCounters",
    "ReconciliationEngine",
    "SubjectDiscrepancy",
    "SubjectResolution",
    "UnclassifiedNamespaceError",
    "UnitResult",
    "build_units",
    "classify_counts",
    "classify_pair",
    "count_pair",
    "resolve_subject",
]
