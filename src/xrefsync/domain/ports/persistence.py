"""Ports for registry lookups and load housekeeping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable


class UnknownRegistryNameError(LookupError):
    """Raised when a configured entity type or namespace name is not registered."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind}: {name!r}")


@dataclass(frozen=True, slots=True, kw_only=True)
class StagedAssociation:
    """One identifier read from an association file, before registry lookup."""

    record_key: int
    identifier: str
    namespace_name: str
    is_subject: bool


@dataclass(frozen=True, slots=True)
class CleanupResult:
    """Row counts removed by prior-run cleanup."""

    references: int = 0
    associations: int = 0
    auxiliary_links: int = 0

    @property
    def total(self) -> int:
        return self.references + self.associations + self.auxiliary_links


@runtime_checkable
class RegistryLookup(Protocol):
    """Resolve configured names to registry keys."""

    def entity_type_key(self, name: str) -> int: ...

    def namespace_key(self, name: str) -> int: ...


@runtime_checkable
class StagingRepository(Protocol):
    """Staging area for association files awaiting reconciliation."""

    def replace_all(self, records: Iterable[StagedAssociation], *, job_stream: str) -> int: ...


@runtime_checkable
class PriorRunCleanup(Protocol):
    """Remove everything a job stream created in its previous run."""

    def delete_prior_records(self, *, created_by: str) -> CleanupResult: ...
