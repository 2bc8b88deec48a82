"""Public domain model surface."""

from __future__ import annotations

from xrefsync.domain.model.enums import AssociationCardinality, ReportKind
from xrefsync.domain.model.records import (
    AssociationRecord,
    AuxiliaryLinkRecord,
    DiscrepancyReport,
)
from xrefsync.domain.model.rows import (
    CandidatePair,
    CandidateRow,
    ReconciliationKey,
    ReconciliationUnit,
    ResolvedEntity,
)

__all__ = [
    "AssociationCardinality",
    "AssociationRecord",
    "AuxiliaryLinkRecord",
    "CandidatePair",
    "CandidateRow",
    "DiscrepancyReport",
    "ReconciliationKey",
    "ReconciliationUnit",
    "ReportKind",
    "ResolvedEntity",
]
