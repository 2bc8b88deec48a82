"""SQLAlchemy-backed units of work for association loads."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from xrefsync.adapters.sqlalchemy.migrations import upgrade_head
from xrefsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyAuxiliaryLinkRepository,
    SqlAlchemyCandidateRowSource,
    SqlAlchemyPriorRunCleanup,
    SqlAlchemyRegistryLookup,
    SqlAlchemyStagingRepository,
)
from xrefsync.adapters.sqlalchemy.sink import SqlAlchemyBulkSink
from xrefsync.config import get_database_config
from xrefsync.domain.ports.unit_of_work import (
    AssociationLoadRepositories,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call xrefsync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine, bring the schema to head, and prepare sessions."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyAssociationLoadUnitOfWork(BaseSqlAlchemyUnitOfWork[AssociationLoadRepositories]):
    """Unit of work for one association load.

    Rows handed to the sink are buffered and only inserted on ``commit``.
    """

    def __init__(
        self,
        *,
        reference_key: int,
        created_by: str,
        private_identifiers: bool = False,
    ) -> None:
        super().__init__()
        self.reference_key = reference_key
        self.created_by = created_by
        self.private_identifiers = private_identifiers
        self._sink: SqlAlchemyBulkSink | None = None

    def _build_repositories(self, session: Session) -> AssociationLoadRepositories:
        self._sink = SqlAlchemyBulkSink(
            session,
            reference_key=self.reference_key,
            created_by=self.created_by,
            private=self.private_identifiers,
        )
        return AssociationLoadRepositories(
            registry=SqlAlchemyRegistryLookup(session),
            candidates=SqlAlchemyCandidateRowSource(session),
            auxiliary_links=SqlAlchemyAuxiliaryLinkRepository(session),
            staging=SqlAlchemyStagingRepository(session),
            cleanup=SqlAlchemyPriorRunCleanup(session),
            sink=self._sink,
        )

    def commit(self) -> None:
        if self._sink is not None:
            self._sink.flush()
        super().commit()

    def rollback(self) -> None:
        if self._sink is not None:
            self._sink.discard()
        super().rollback()


if TYPE_CHECKING:
    from xrefsync.domain.ports.unit_of_work import AssociationLoadUnitOfWork

    _uow_check: AssociationLoadUnitOfWork = SqlAlchemyAssociationLoadUnitOfWork(
        reference_key=0, created_by=""
    )
