"""Port for handing reconciliation decisions to durable storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from xrefsync.domain.model import AssociationRecord, AuxiliaryLinkRecord, DiscrepancyReport


@runtime_checkable
class AssociationSink(Protocol):
    """Accepts decided rows; nothing is durable before the unit of work commits.

    Implementations may buffer rows, so rows added during a run need not be
    visible to repository reads in the same run.
    """

    def add_association(self, record: AssociationRecord) -> None: ...

    def add_auxiliary_link(self, record: AuxiliaryLinkRecord) -> None: ...

    def add_discrepancy(self, report: DiscrepancyReport) -> None: ...
