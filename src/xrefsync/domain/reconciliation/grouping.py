"""Fold key-contiguous candidate rows into reconciliation units.

Responsibilities of this stage:
- group rows lazily, one unit per reconciliation key
- keep input row order inside every unit
- refuse a key that reappears after another key was seen

Rows of one key must arrive contiguously; interleaved keys raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from xrefsync.domain.model import ReconciliationUnit

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from xrefsync.domain.model import CandidateRow, ReconciliationKey


class NonContiguousKeyError(ValueError):
    """Raised when rows of one reconciliation key are interleaved with another key."""

    def __init__(self, key: ReconciliationKey) -> None:
        self.key = key
        super().__init__(f"Reconciliation key {key!r} reappeared after its rows were grouped")


def build_units(
    rows: Iterable[CandidateRow],
    *,
    expected_subject_type: int,
) -> Iterator[ReconciliationUnit]:
    """Yield one unit per distinct key as soon as the key's last row was read."""

    closed: set[ReconciliationKey] = set()
    current_key: ReconciliationKey | None = None
    buffer: list[CandidateRow] = []

    for row in rows:
        key = row.reconciliation_key
        if buffer and key == current_key:
            buffer.append(row)
            continue
        if key in closed:
            raise NonContiguousKeyError(key)
        if buffer and current_key is not None:
            closed.add(current_key)
            yield ReconciliationUnit(current_key, expected_subject_type, tuple(buffer))
        current_key = key
        buffer = [row]

    if buffer and current_key is not None:
        yield ReconciliationUnit(current_key, expected_subject_type, tuple(buffer))
