from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from xrefsync.adapters.sqlalchemy.mappings import entity_type_table, namespace_table
from xrefsync.adapters.sqlalchemy.migrations import upgrade_head
from xrefsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyAssociationLoadUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.associations import (
    MARKER_TYPE,
    MULTIPLE_NAMESPACE,
    PROBE_TYPE,
    SEQUENCE_TYPE,
    SINGLE_NAMESPACE,
    SUBJECT_NAMESPACE,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

ENTITY_TYPES = {
    MARKER_TYPE: "Marker",
    PROBE_TYPE: "Molecular Segment",
    SEQUENCE_TYPE: "Sequence",
    21: "Accession Reservation",
}
NAMESPACES = {
    SUBJECT_NAMESPACE: "MGI",
    SINGLE_NAMESPACE: "Sequence DB",
    MULTIPLE_NAMESPACE: "RefSeq",
}


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    with engine.begin() as connection:
        connection.execute(
            insert(entity_type_table),
            [{"key": key, "name": name} for key, name in ENTITY_TYPES.items()],
        )
        connection.execute(
            insert(namespace_table),
            [{"key": key, "name": name} for key, name in NAMESPACES.items()],
        )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyAssociationLoadUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyAssociationLoadUnitOfWork:
        return SqlAlchemyAssociationLoadUnitOfWork(reference_key=61025, created_by="test_load")

    try:
        yield factory
    finally:
        shutdown()
