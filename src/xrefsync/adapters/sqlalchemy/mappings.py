"""SQLAlchemy table metadata for the association registry."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    func,
)

from xrefsync.domain.model import ReportKind


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# Registry --------------------------------------------------------------------

entity_type_table = Table(
    "entity_type",
    metadata,
    Column("key", Integer, primary_key=True, autoincrement=False),
    Column("name", String, nullable=False, unique=True),
)

namespace_table = Table(
    "namespace",
    metadata,
    Column("key", Integer, primary_key=True, autoincrement=False),
    Column("name", String, nullable=False, unique=True),
)

association_table = Table(
    "association",
    metadata,
    Column("key", Integer, primary_key=True, autoincrement=False),
    Column("identifier", String, nullable=False),
    Column("prefix_part", String, nullable=True),
    Column("numeric_part", Integer, nullable=True),
    Column("namespace_key", Integer, ForeignKey("namespace.key"), nullable=False),
    Column("entity_type_key", Integer, ForeignKey("entity_type.key"), nullable=False),
    Column("entity_key", Integer, nullable=False),
    Column("private", Boolean, nullable=False, default=False),
    Column("preferred", Boolean, nullable=False, default=True),
    Column("created_by", String, nullable=False),
    Column("created_at", UTCDateTime, nullable=False, server_default=func.now()),
    Index("ix_association_identifier_namespace", "identifier", "namespace_key"),
    Index("ix_association_created_by", "created_by"),
)

association_reference_table = Table(
    "association_reference",
    metadata,
    Column(
        "association_key",
        Integer,
        ForeignKey("association.key", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("reference_key", Integer, primary_key=True),
    Column("created_by", String, nullable=False),
    Column("created_at", UTCDateTime, nullable=False, server_default=func.now()),
)

auxiliary_link_table = Table(
    "auxiliary_link",
    metadata,
    Column("subject_key", Integer, primary_key=True),
    Column("reference_key", Integer, primary_key=True),
    Column("created_by", String, nullable=False),
    Column("created_at", UTCDateTime, nullable=False, server_default=func.now()),
)

# Load bookkeeping --------------------------------------------------------------

association_staging_table = Table(
    "association_staging",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("job_stream", String, nullable=False),
    Column("record_key", Integer, nullable=False),
    Column("identifier", String, nullable=False),
    Column("namespace_name", String, nullable=False),
    Column("is_subject", Boolean, nullable=False, default=False),
    Index("ix_association_staging_job_stream_record", "job_stream", "record_key"),
)

discrepancy_report_table = Table(
    "discrepancy_report",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", Enum(ReportKind, native_enum=False, length=16), nullable=False),
    Column("subject_identifier", String, nullable=False),
    Column("subject_namespace_key", Integer, nullable=False),
    Column("subject_entity_key", Integer, nullable=True),
    Column("subject_entity_type", Integer, nullable=True),
    Column("candidate_identifier", String, nullable=True),
    Column("candidate_namespace_key", Integer, nullable=True),
    Column("candidate_entity_key", Integer, nullable=True),
    Column("candidate_entity_type", Integer, nullable=True),
    Column("expected_type", Integer, nullable=False),
    Column("code", String(1), nullable=False),
    Column("message", String, nullable=False),
    Column("created_by", String, nullable=False),
    Column("created_at", UTCDateTime, nullable=False, server_default=func.now()),
)
