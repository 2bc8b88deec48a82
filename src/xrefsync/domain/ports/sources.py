"""Ports for reading candidate rows and prior auxiliary links."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from xrefsync.domain.model import CandidateRow


@runtime_checkable
class CandidateRowSource(Protocol):
    """Yields annotated candidate rows with all rows of one key contiguous."""

    def iter_rows(
        self,
        *,
        job_stream: str,
        ignored_entity_types: Iterable[int] = (),
    ) -> Iterator[CandidateRow]: ...


@runtime_checkable
class AuxiliaryLinkRepository(Protocol):
    """Read access to auxiliary links persisted by earlier runs."""

    def existing_subject_keys(self, *, reference_key: int) -> Iterable[int]: ...
