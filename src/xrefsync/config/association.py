"""Association load configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from .env import env_flag, env_list, optional_env_var, parse_int, require_env_vars
from .errors import ConfigurationError

DEFAULT_IGNORED_ENTITY_TYPES: tuple[int, ...] = (21, 25)


@dataclass(frozen=True, slots=True)
class AssociationLoadConfig:
    """Settings for one association load run.

    Entity types and namespaces are configured by registry name and resolved
    to keys when the run starts.
    """

    target_type: str
    job_stream: str
    reference_key: int
    single_namespaces: tuple[str, ...] = ()
    multiple_namespaces: tuple[str, ...] = ()
    linkable_type: str | None = None
    ignored_entity_types: tuple[int, ...] = DEFAULT_IGNORED_ENTITY_TYPES
    delete_reload: bool = False
    input_file: Path | None = None
    private_identifiers: bool = False

    def __post_init__(self) -> None:
        overlap = set(self.single_namespaces) & set(self.multiple_namespaces)
        if overlap:
            names = ", ".join(sorted(overlap))
            raise ConfigurationError(
                f"Namespaces configured as both single and multiple: {names}"
            )

    def with_overrides(
        self,
        *,
        input_file: Path | None = None,
        delete_reload: bool | None = None,
    ) -> AssociationLoadConfig:
        """Return a copy with command-line overrides applied."""

        return replace(
            self,
            input_file=input_file if input_file is not None else self.input_file,
            delete_reload=self.delete_reload if delete_reload is None else delete_reload,
        )


def get_association_load_config() -> AssociationLoadConfig:
    values = require_env_vars(
        ("XREFSYNC_TARGET_TYPE", "XREFSYNC_JOB_STREAM", "XREFSYNC_REFERENCE_KEY")
    )
    input_file = optional_env_var("XREFSYNC_INPUT_FILE")
    return AssociationLoadConfig(
        target_type=values["XREFSYNC_TARGET_TYPE"].strip(),
        job_stream=values["XREFSYNC_JOB_STREAM"].strip(),
        reference_key=parse_int("XREFSYNC_REFERENCE_KEY", values["XREFSYNC_REFERENCE_KEY"]),
        single_namespaces=env_list("XREFSYNC_SINGLE_NAMESPACES"),
        multiple_namespaces=env_list("XREFSYNC_MULTIPLE_NAMESPACES"),
        linkable_type=optional_env_var("XREFSYNC_LINKABLE_TYPE"),
        ignored_entity_types=_ignored_entity_types(),
        delete_reload=env_flag("XREFSYNC_DELETE_RELOAD"),
        input_file=Path(input_file) if input_file else None,
        private_identifiers=env_flag("XREFSYNC_PRIVATE_IDS"),
    )


def _ignored_entity_types() -> tuple[int, ...]:
    """Unset means the defaults; set but blank means no entity type is ignored."""

    if os.getenv("XREFSYNC_IGNORED_TYPES") is None:
        return DEFAULT_IGNORED_ENTITY_TYPES
    return tuple(
        parse_int("XREFSYNC_IGNORED_TYPES", item) for item in env_list("XREFSYNC_IGNORED_TYPES")
    )
