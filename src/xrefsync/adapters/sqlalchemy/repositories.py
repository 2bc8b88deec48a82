"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import and_, delete, insert, select

from xrefsync.adapters.sqlalchemy.mappings import (
    association_reference_table,
    association_staging_table,
    association_table,
    auxiliary_link_table,
    entity_type_table,
    namespace_table,
)
from xrefsync.domain.model import CandidateRow
from xrefsync.domain.ports.persistence import CleanupResult, UnknownRegistryNameError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from xrefsync.domain.ports.persistence import StagedAssociation

log = logging.getLogger(__name__)


class SqlAlchemyRegistryLookup:
    def __init__(self, session: Session) -> None:
        self.session = session

    def entity_type_key(self, name: str) -> int:
        return self._key_for(entity_type_table, "entity type", name)

    def namespace_key(self, name: str) -> int:
        return self._key_for(namespace_table, "namespace", name)

    def _key_for(self, table: Table, kind: str, name: str) -> int:
        stmt = select(table.c.key).where(table.c.name == name)
        key = self.session.execute(stmt).scalar_one_or_none()
        if key is None:
            raise UnknownRegistryNameError(kind, name)
        return key


class SqlAlchemyCandidateRowSource:
    """Annotate staged identifiers with every registry entity they already resolve to.

    A staged identifier without a registry match still yields one row, with no
    entity. Associations owned by an ignored entity type are treated as absent.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def iter_rows(
        self,
        *,
        job_stream: str,
        ignored_entity_types: Iterable[int] = (),
    ) -> Iterator[CandidateRow]:
        staged = association_staging_table
        known = association_table
        ignored = tuple(ignored_entity_types)

        match = and_(
            known.c.identifier == staged.c.identifier,
            known.c.namespace_key == namespace_table.c.key,
        )
        if ignored:
            match = and_(match, known.c.entity_type_key.not_in(ignored))

        stmt = (
            select(
                staged.c.record_key,
                staged.c.identifier,
                namespace_table.c.key,
                staged.c.is_subject,
                known.c.entity_type_key,
                known.c.entity_key,
            )
            .select_from(
                staged.join(namespace_table, namespace_table.c.name == staged.c.namespace_name)
                .outerjoin(known, match)
            )
            .where(staged.c.job_stream == job_stream)
            .order_by(staged.c.record_key, staged.c.identifier, namespace_table.c.key)
        )
        for record_key, identifier, namespace_key, is_subject, type_key, entity_key in (
            self.session.execute(stmt)
        ):
            yield CandidateRow(
                reconciliation_key=record_key,
                identifier=identifier,
                namespace_key=namespace_key,
                is_subject=is_subject,
                entity_type=type_key,
                entity_key=entity_key,
            )


class SqlAlchemyAuxiliaryLinkRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def existing_subject_keys(self, *, reference_key: int) -> set[int]:
        stmt = select(auxiliary_link_table.c.subject_key).where(
            auxiliary_link_table.c.reference_key == reference_key
        )
        return set(self.session.execute(stmt).scalars())


class SqlAlchemyStagingRepository:
    """Job-stream scoped staging of association files."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def replace_all(self, records: Iterable[StagedAssociation], *, job_stream: str) -> int:
        self.session.execute(
            delete(association_staging_table).where(
                association_staging_table.c.job_stream == job_stream
            )
        )
        rows = [
            {
                "job_stream": job_stream,
                "record_key": record.record_key,
                "identifier": record.identifier,
                "namespace_name": record.namespace_name,
                "is_subject": record.is_subject,
            }
            for record in records
        ]
        if rows:
            self.session.execute(insert(association_staging_table), rows)
        log.info("Staged %s identifiers for job stream %s", len(rows), job_stream)
        return len(rows)


class SqlAlchemyPriorRunCleanup:
    def __init__(self, session: Session) -> None:
        self.session = session

    def delete_prior_records(self, *, created_by: str) -> CleanupResult:
        owned = select(association_table.c.key).where(association_table.c.created_by == created_by)
        references = self.session.execute(
            delete(association_reference_table).where(
                association_reference_table.c.association_key.in_(owned)
                | (association_reference_table.c.created_by == created_by)
            )
        ).rowcount
        associations = self.session.execute(
            delete(association_table).where(association_table.c.created_by == created_by)
        ).rowcount
        links = self.session.execute(
            delete(auxiliary_link_table).where(auxiliary_link_table.c.created_by == created_by)
        ).rowcount
        result = CleanupResult(
            references=references,
            associations=associations,
            auxiliary_links=links,
        )
        log.info(
            "Deleted %s associations, %s references and %s auxiliary links created by %s",
            result.associations,
            result.references,
            result.auxiliary_links,
            created_by,
        )
        return result
