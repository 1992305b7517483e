"""Configuration management: profiles, table descriptors, TOML loading.

Usage:
    >>> from db_repository.config import load_db_config, TableConfig, CompositeTableConfig
"""

from db_repository.config.loader import load_db_config
from db_repository.config.models import (
    CompositeTableConfig,
    DatabaseConfig,
    DatabaseProfile,
    TableConfig,
)

__all__ = [
    "load_db_config",
    "DatabaseConfig",
    "DatabaseProfile",
    "TableConfig",
    "CompositeTableConfig",
]
