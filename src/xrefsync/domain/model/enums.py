"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ReportKind(StrEnum):
    """Which decision phase produced a discrepancy report."""

    SUBJECT = "subject"
    CANDIDATE = "candidate"


class AssociationCardinality(StrEnum):
    """How many registry entities one identifier of a namespace may point at."""

    SINGLE = "single"
    MULTIPLE = "multiple"
