"""Records handed to the sink for bulk persistence."""

from __future__ import annotations

from dataclasses import dataclass

from xrefsync.domain.model.enums import ReportKind


@dataclass(frozen=True, slots=True, kw_only=True)
class AssociationRecord:
    """New link between an identifier and a registry entity."""

    identifier: str
    namespace_key: int
    entity_type: int
    entity_key: int


@dataclass(frozen=True, slots=True)
class AuxiliaryLinkRecord:
    """Once-per-subject secondary record for subjects of the linkable type."""

    subject_key: int


@dataclass(frozen=True, slots=True, kw_only=True)
class DiscrepancyReport:
    """One reported conflict, either on a subject row or on a candidate row.

    Subject reports leave every ``candidate_*`` field empty. ``subject_entity_*``
    are empty when the subject identifier has no registry match.
    """

    kind: ReportKind
    subject_identifier: str
    subject_namespace: int
    expected_type: int
    code: str
    message: str
    subject_entity_key: int | None = None
    subject_entity_type: int | None = None
    candidate_identifier: str | None = None
    candidate_namespace: int | None = None
    candidate_entity_key: int | None = None
    candidate_entity_type: int | None = None
