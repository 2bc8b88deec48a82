"""Orchestrator for the reconciliation subsystem.

The engine processes one unit at a time, in source order:
1) check every candidate namespace against the namespace policy
2) resolve the subject; a subject discrepancy reports the subject rows and
   skips the whole unit
3) classify every distinct candidate pair
4) report discrepancies, then write associations unless any pair in the unit
   was a report-and-skip outcome

The engine owns the auxiliary link cache for the run and never commits; the
sink and unit of work decide when rows become durable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from xrefsync.domain.model import (
    AssociationRecord,
    AuxiliaryLinkRecord,
    DiscrepancyReport,
    ReportKind,
)

from .classify import classify_pair
from .contracts import PairAction
from .link_cache import AuxiliaryLinkCache
from .subject import SubjectResolution, resolve_subject

if TYPE_CHECKING:
    from collections.abc import Iterable

    from xrefsync.domain.model import (
        CandidatePair,
        CandidateRow,
        ReconciliationKey,
        ReconciliationUnit,
        ResolvedEntity,
    )
    from xrefsync.domain.ports.sink import AssociationSink

    from .contracts import PairCounts, PairOutcome
    from .policy import NamespacePolicy

log = logging.getLogger(__name__)

DEFAULT_PROGRESS_INTERVAL = 10_000


@dataclass(slots=True)
class ReconciliationCounters:
    """Run-level counters, read once the run is complete."""

    existing: int = 0
    skipped: int = 0
    associated: int = 0
    reported: int = 0


@dataclass(frozen=True, slots=True)
class PairDecision:
    """Classification of one distinct pair and whether its write was performed."""

    pair: CandidatePair
    counts: PairCounts
    outcome: PairOutcome
    associated: bool = False


@dataclass(frozen=True, slots=True)
class UnitResult:
    """Everything the engine decided for one unit."""

    key: ReconciliationKey
    subject: SubjectResolution
    decisions: tuple[PairDecision, ...] = ()
    suppressed: bool = False

    @property
    def associations_written(self) -> int:
        return sum(1 for decision in self.decisions if decision.associated)


@dataclass(slots=True)
class ReconciliationEngine:
    """Classify reconciliation units and hand the resulting rows to the sink."""

    policy: NamespacePolicy
    sink: AssociationSink
    link_cache: AuxiliaryLinkCache = field(default_factory=AuxiliaryLinkCache)
    linkable_entity_type: int | None = None
    counters: ReconciliationCounters = field(default_factory=ReconciliationCounters)
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL

    def run(self, units: Iterable[ReconciliationUnit]) -> ReconciliationCounters:
        """Process every unit in order and return the run counters."""

        processed = 0
        for unit in units:
            if processed and processed % self.progress_interval == 0:
                log.info("Processed %s reconciliation units", processed)
            self.process(unit)
            processed += 1
        log.info("Processed %s reconciliation units", processed)
        return self.counters

    def process(self, unit: ReconciliationUnit) -> UnitResult:
        """Classify one unit and emit its reports and associations."""

        self.policy.require_classified(pair.namespace_key for pair in unit.distinct_pairs)

        subject = resolve_subject(unit)
        target = subject.target
        subject_row = subject.subject_row
        if target is None or subject_row is None:
            self._report_subject(unit, subject)
            return UnitResult(key=unit.key, subject=subject)

        classified = [
            (pair, *classify_pair(unit, pair, target=target, policy=self.policy))
            for pair in unit.distinct_pairs
        ]
        suppressed = any(outcome.blocks_unit for _pair, _counts, outcome in classified)

        decisions: list[PairDecision] = []
        for pair, counts, outcome in classified:
            if outcome.action is PairAction.EXISTS:
                log.debug("Exists: %s,%s", pair.identifier, pair.namespace_key)
                self.counters.existing += 1
                decisions.append(PairDecision(pair, counts, outcome))
                continue

            if outcome.reports:
                self._report_candidate(unit, pair, outcome, subject_row=subject_row)

            associated = outcome.associates and not suppressed
            if associated:
                self._associate(pair, target)
            decisions.append(PairDecision(pair, counts, outcome, associated=associated))

        if suppressed:
            self.counters.skipped += len(unit.distinct_pairs)

        return UnitResult(
            key=unit.key,
            subject=subject,
            decisions=tuple(decisions),
            suppressed=suppressed,
        )

    def _report_subject(self, unit: ReconciliationUnit, subject: SubjectResolution) -> None:
        discrepancy = subject.discrepancy
        if discrepancy is None:  # pragma: no cover - unresolved subjects always carry a code
            raise RuntimeError(f"Unresolved subject for key {unit.key!r} without discrepancy")

        for row in unit.subject_rows:
            log.debug(
                "Subject discrepancy: %s,%s,%s,%s,%s,%s",
                row.identifier,
                row.namespace_key,
                row.entity_key or 0,
                row.entity_type or 0,
                unit.expected_subject_type,
                discrepancy.message,
            )
            self.sink.add_discrepancy(
                DiscrepancyReport(
                    kind=ReportKind.SUBJECT,
                    subject_identifier=row.identifier,
                    subject_namespace=row.namespace_key,
                    subject_entity_key=row.entity_key,
                    subject_entity_type=row.entity_type,
                    expected_type=unit.expected_subject_type,
                    code=discrepancy.value,
                    message=discrepancy.message,
                )
            )
            self.counters.reported += 1

        self.counters.skipped += len(unit.distinct_pairs)

    def _report_candidate(
        self,
        unit: ReconciliationUnit,
        pair: CandidatePair,
        outcome: PairOutcome,
        *,
        subject_row: CandidateRow,
    ) -> None:
        discrepancy = outcome.discrepancy
        if discrepancy is None:  # pragma: no cover - guarded by PairOutcome.reports
            return

        for row in unit.rows_for(pair):
            log.debug(
                "Candidate discrepancy: %s,%s,%s,%s,%s,%s,%s,%s,%s",
                subject_row.identifier,
                subject_row.namespace_key,
                subject_row.entity_key,
                unit.expected_subject_type,
                row.identifier,
                row.namespace_key,
                row.entity_key,
                row.entity_type,
                discrepancy.message,
            )
            self.sink.add_discrepancy(
                DiscrepancyReport(
                    kind=ReportKind.CANDIDATE,
                    subject_identifier=subject_row.identifier,
                    subject_namespace=subject_row.namespace_key,
                    subject_entity_key=subject_row.entity_key,
                    subject_entity_type=unit.expected_subject_type,
                    candidate_identifier=row.identifier,
                    candidate_namespace=row.namespace_key,
                    candidate_entity_key=row.entity_key,
                    candidate_entity_type=row.entity_type,
                    expected_type=unit.expected_subject_type,
                    code=discrepancy.value,
                    message=discrepancy.message,
                )
            )
            self.counters.reported += 1

    def _associate(self, pair: CandidatePair, target: ResolvedEntity) -> None:
        log.debug(
            "Make association: %s,%s,%s,%s",
            pair.identifier,
            pair.namespace_key,
            target.entity_key,
            target.entity_type,
        )
        self.sink.add_association(
            AssociationRecord(
                identifier=pair.identifier,
                namespace_key=pair.namespace_key,
                entity_type=target.entity_type,
                entity_key=target.entity_key,
            )
        )
        self.counters.associated += 1

        if target.entity_type != self.linkable_entity_type:
            return
        if self.link_cache.contains(target.entity_key):
            return
        self.sink.add_auxiliary_link(AuxiliaryLinkRecord(target.entity_key))
        self.link_cache.record(target.entity_key)
