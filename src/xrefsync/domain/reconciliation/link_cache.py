"""Run-scoped cache of subjects that already own an auxiliary link.

The sink defers writes until commit, so a storage read cannot see links
emitted earlier in the same run. The cache is primed once from storage and
then records every link the engine emits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(slots=True)
class AuxiliaryLinkCache:
    """In-memory set of subject keys with an existing or pending auxiliary link."""

    _subject_keys: set[int] = field(default_factory=set[int], repr=False)

    @classmethod
    def from_keys(cls, subject_keys: Iterable[int]) -> AuxiliaryLinkCache:
        return cls(set(subject_keys))

    def contains(self, subject_key: int) -> bool:
        return subject_key in self._subject_keys

    def record(self, subject_key: int) -> None:
        self._subject_keys.add(subject_key)

    def __contains__(self, subject_key: object) -> bool:
        return subject_key in self._subject_keys

    def __len__(self) -> int:
        return len(self._subject_keys)
