"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    CleanupResult,
    PriorRunCleanup,
    RegistryLookup,
    StagedAssociation,
    StagingRepository,
    UnknownRegistryNameError,
)
from .sink import AssociationSink
from .sources import AuxiliaryLinkRepository, CandidateRowSource
from .unit_of_work import (
    AssociationLoadRepositories,
    AssociationLoadUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AssociationLoadRepositories",
    "AssociationLoadUnitOfWork",
    "AssociationSink",
    "AuxiliaryLinkRepository",
    "CandidateRowSource",
    "CleanupResult",
    "PriorRunCleanup",
    "RegistryLookup",
    "RepositoryCollection",
    "StagedAssociation",
    "StagingRepository",
    "UnitOfWork",
    "UnknownRegistryNameError",
]
