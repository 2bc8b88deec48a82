"""Namespace cardinality policy for candidate classification.

Every namespace a candidate pair can carry must be configured as allowing
either one or many registry entities per identifier. The policy is static for
one run, and an unclassified namespace aborts the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from xrefsync.domain.model import AssociationCardinality

if TYPE_CHECKING:
    from collections.abc import Iterable


class NamespacePolicyError(ValueError):
    """Raised when the namespace policy configuration is unusable."""


class UnclassifiedNamespaceError(NamespacePolicyError):
    """Raised when a namespace belongs to neither cardinality class."""

    def __init__(self, namespace_key: int) -> None:
        self.namespace_key = namespace_key
        super().__init__(
            f"Namespace ({namespace_key}) must be configured to allow either single "
            "or multiple associations."
        )


class OverlappingNamespaceError(NamespacePolicyError):
    """Raised when namespaces are configured as both single and multiple."""

    def __init__(self, namespace_keys: Iterable[int]) -> None:
        self.namespace_keys = tuple(sorted(namespace_keys))
        keys = ", ".join(str(key) for key in self.namespace_keys)
        super().__init__(f"Namespaces configured as both single and multiple: {keys}")


@dataclass(frozen=True, slots=True)
class NamespacePolicy:
    """Disjoint partition of namespace keys by association cardinality."""

    single_association: frozenset[int] = field(default_factory=frozenset[int])
    multiple_association: frozenset[int] = field(default_factory=frozenset[int])

    def __post_init__(self) -> None:
        overlap = self.single_association & self.multiple_association
        if overlap:
            raise OverlappingNamespaceError(overlap)

    @classmethod
    def of(cls, *, single: Iterable[int] = (), multiple: Iterable[int] = ()) -> NamespacePolicy:
        return cls(frozenset(single), frozenset(multiple))

    def cardinality_for(self, namespace_key: int) -> AssociationCardinality:
        if namespace_key in self.single_association:
            return AssociationCardinality.SINGLE
        if namespace_key in self.multiple_association:
            return AssociationCardinality.MULTIPLE
        raise UnclassifiedNamespaceError(namespace_key)

    def require_classified(self, namespace_keys: Iterable[int]) -> None:
        """Raise for the first namespace key that has no cardinality."""

        for namespace_key in namespace_keys:
            self.cardinality_for(namespace_key)
