"""Application configuration helpers."""

from __future__ import annotations

from .association import (
    DEFAULT_IGNORED_ENTITY_TYPES,
    AssociationLoadConfig,
    get_association_load_config,
)
from .env import env_flag, env_list, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_IGNORED_ENTITY_TYPES",
    "AssociationLoadConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_list",
    "get_association_load_config",
    "get_database_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
