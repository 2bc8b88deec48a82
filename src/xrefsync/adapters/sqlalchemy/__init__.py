"""SQLAlchemy adapter package for xrefsync."""

from __future__ import annotations

from .mappings import metadata
from .repositories import (
    SqlAlchemyAuxiliaryLinkRepository,
    SqlAlchemyCandidateRowSource,
    SqlAlchemyPriorRunCleanup,
    SqlAlchemyRegistryLookup,
    SqlAlchemyStagingRepository,
)
from .sink import SqlAlchemyBulkSink, split_identifier
from .unit_of_work import (
    SqlAlchemyAssociationLoadUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAssociationLoadUnitOfWork",
    "SqlAlchemyAuxiliaryLinkRepository",
    "SqlAlchemyBulkSink",
    "SqlAlchemyCandidateRowSource",
    "SqlAlchemyPriorRunCleanup",
    "SqlAlchemyRegistryLookup",
    "SqlAlchemyStagingRepository",
    "StartupError",
    "metadata",
    "shutdown",
    "split_identifier",
    "startup",
]
