"""Buffered association sink that writes in bulk when the unit of work commits."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select

from xrefsync.adapters.sqlalchemy.mappings import (
    association_reference_table,
    association_table,
    auxiliary_link_table,
    discrepancy_report_table,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from xrefsync.domain.model import AssociationRecord, AuxiliaryLinkRecord, DiscrepancyReport

log = logging.getLogger(__name__)

_TRAILING_DIGITS = re.compile(r"^(?P<prefix>.*?)(?P<number>\d+)$")


def split_identifier(identifier: str) -> tuple[str | None, int | None]:
    """Split ``identifier`` into its prefix and trailing numeric part.

    >>> split_identifier("MGI:12345")
    ('MGI:', 12345)
    >>> split_identifier("NM_000546")
    ('NM_', 546)
    >>> split_identifier("abc")
    ('abc', None)
    """

    match = _TRAILING_DIGITS.match(identifier)
    if match is None:
        return identifier, None
    prefix = match.group("prefix")
    return (prefix or None), int(match.group("number"))


@dataclass(frozen=True, slots=True)
class FlushResult:
    associations: int = 0
    references: int = 0
    auxiliary_links: int = 0
    discrepancies: int = 0


class SqlAlchemyBulkSink:
    """Collect decided rows in memory and insert them in one pass.

    Association keys are allocated from the current maximum the first time an
    association is added, so the sink must be the only writer of the
    association table while a load is running.
    """

    def __init__(
        self,
        session: Session,
        *,
        reference_key: int,
        created_by: str,
        private: bool = False,
    ) -> None:
        self.session = session
        self.reference_key = reference_key
        self.created_by = created_by
        self.private = private
        self._next_key: int | None = None
        self._associations: list[dict[str, Any]] = []
        self._references: list[dict[str, Any]] = []
        self._links: list[dict[str, Any]] = []
        self._discrepancies: list[dict[str, Any]] = []

    @property
    def pending(self) -> int:
        return (
            len(self._associations)
            + len(self._references)
            + len(self._links)
            + len(self._discrepancies)
        )

    def add_association(self, record: AssociationRecord) -> None:
        key = self._allocate_key()
        prefix, number = split_identifier(record.identifier)
        self._associations.append(
            {
                "key": key,
                "identifier": record.identifier,
                "prefix_part": prefix,
                "numeric_part": number,
                "namespace_key": record.namespace_key,
                "entity_type_key": record.entity_type,
                "entity_key": record.entity_key,
                "private": self.private,
                "preferred": True,
                "created_by": self.created_by,
            }
        )
        self._references.append(
            {
                "association_key": key,
                "reference_key": self.reference_key,
                "created_by": self.created_by,
            }
        )

    def add_auxiliary_link(self, record: AuxiliaryLinkRecord) -> None:
        self._links.append(
            {
                "subject_key": record.subject_key,
                "reference_key": self.reference_key,
                "created_by": self.created_by,
            }
        )

    def add_discrepancy(self, report: DiscrepancyReport) -> None:
        self._discrepancies.append(
            {
                "kind": report.kind,
                "subject_identifier": report.subject_identifier,
                "subject_namespace_key": report.subject_namespace,
                "subject_entity_key": report.subject_entity_key,
                "subject_entity_type": report.subject_entity_type,
                "candidate_identifier": report.candidate_identifier,
                "candidate_namespace_key": report.candidate_namespace,
                "candidate_entity_key": report.candidate_entity_key,
                "candidate_entity_type": report.candidate_entity_type,
                "expected_type": report.expected_type,
                "code": report.code,
                "message": report.message,
                "created_by": self.created_by,
            }
        )

    def flush(self) -> FlushResult:
        """Insert every buffered row into the session and clear the buffers."""

        result = FlushResult(
            associations=len(self._associations),
            references=len(self._references),
            auxiliary_links=len(self._links),
            discrepancies=len(self._discrepancies),
        )
        for table, rows in (
            (association_table, self._associations),
            (association_reference_table, self._references),
            (auxiliary_link_table, self._links),
            (discrepancy_report_table, self._discrepancies),
        ):
            if rows:
                self.session.execute(insert(table), rows)
            rows.clear()
        self.session.flush()
        log.info(
            "Wrote %s associations, %s references, %s auxiliary links, %s discrepancy reports",
            result.associations,
            result.references,
            result.auxiliary_links,
            result.discrepancies,
        )
        return result

    def discard(self) -> None:
        self._associations.clear()
        self._references.clear()
        self._links.clear()
        self._discrepancies.clear()
        self._next_key = None

    def _allocate_key(self) -> int:
        if self._next_key is None:
            current = self.session.execute(select(func.max(association_table.c.key))).scalar()
            self._next_key = (current or 0) + 1
        key = self._next_key
        self._next_key += 1
        return key
