"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from xrefsync.adapters.association_file import read_association_file
from xrefsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyAssociationLoadUnitOfWork,
    startup,
)
from xrefsync.domain.ports.persistence import CleanupResult
from xrefsync.domain.ports.unit_of_work import AssociationLoadUnitOfWork
from xrefsync.domain.reconciliation import (
    AuxiliaryLinkCache,
    NamespacePolicy,
    ReconciliationCounters,
    ReconciliationEngine,
    build_units,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from xrefsync.config import AssociationLoadConfig
    from xrefsync.domain.model import ReconciliationUnit
    from xrefsync.domain.ports.persistence import RegistryLookup

UnitOfWorkFactory = Callable[[], AssociationLoadUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class LoadSummary:
    """Outcome of one association load run."""

    counters: ReconciliationCounters = field(default_factory=ReconciliationCounters)
    units: int = 0
    staged_records: int = 0
    deleted: CleanupResult = field(default_factory=CleanupResult)


def run_association_load(
    config: AssociationLoadConfig,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> LoadSummary:
    """Reconcile the staged associations of ``config.job_stream`` with the registry."""

    if unit_of_work_factory is None:
        startup()
    effective_uow = unit_of_work_factory or _sqlalchemy_unit_of_work_factory(config)

    log.info(
        "Starting association load: job_stream=%s, target_type=%s, delete_reload=%s, "
        "input_file=%s",
        config.job_stream,
        config.target_type,
        config.delete_reload,
        config.input_file,
    )

    summary = LoadSummary()
    with effective_uow() as uow:
        repositories = uow.repositories
        registry = repositories.registry

        target_type = registry.entity_type_key(config.target_type)
        linkable_type = (
            registry.entity_type_key(config.linkable_type)
            if config.linkable_type is not None
            else None
        )
        policy = _build_policy(registry, config)

        if config.delete_reload:
            summary.deleted = repositories.cleanup.delete_prior_records(
                created_by=config.job_stream
            )

        if config.input_file is not None:
            association_file = read_association_file(config.input_file)
            for name in association_file.namespaces:
                registry.namespace_key(name)
            repositories.staging.replace_all(
                association_file.records, job_stream=config.job_stream
            )
            summary.staged_records = association_file.record_count

        link_cache = AuxiliaryLinkCache.from_keys(
            repositories.auxiliary_links.existing_subject_keys(
                reference_key=config.reference_key
            )
        )
        log.info("Primed auxiliary link cache with %s subjects", len(link_cache))

        engine = ReconciliationEngine(
            policy=policy,
            sink=repositories.sink,
            link_cache=link_cache,
            linkable_entity_type=linkable_type,
        )
        rows = repositories.candidates.iter_rows(
            job_stream=config.job_stream,
            ignored_entity_types=config.ignored_entity_types,
        )
        units = build_units(rows, expected_subject_type=target_type)
        summary.counters = engine.run(_counted(units, summary))
        uow.commit()

    counters = summary.counters
    log.info(
        "Finished association load: units=%s, existing=%s, associated=%s, skipped=%s, "
        "reported=%s",
        summary.units,
        counters.existing,
        counters.associated,
        counters.skipped,
        counters.reported,
    )
    return summary


def _sqlalchemy_unit_of_work_factory(config: AssociationLoadConfig) -> UnitOfWorkFactory:
    def factory() -> AssociationLoadUnitOfWork:
        return SqlAlchemyAssociationLoadUnitOfWork(
            reference_key=config.reference_key,
            created_by=config.job_stream,
            private_identifiers=config.private_identifiers,
        )

    return factory


def _build_policy(registry: RegistryLookup, config: AssociationLoadConfig) -> NamespacePolicy:
    single = [registry.namespace_key(name) for name in config.single_namespaces]
    multiple = [registry.namespace_key(name) for name in config.multiple_namespaces]
    log.info("Single association namespaces: %s", ", ".join(config.single_namespaces) or "-")
    log.info(
        "Multiple association namespaces: %s", ", ".join(config.multiple_namespaces) or "-"
    )
    return NamespacePolicy.of(single=single, multiple=multiple)


def _counted(
    units: Iterable[ReconciliationUnit], summary: LoadSummary
) -> Iterator[ReconciliationUnit]:
    for unit in units:
        summary.units += 1
        yield unit
