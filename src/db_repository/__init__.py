"""db-repository: async CRUD repositories over relational tables.

Binds a table descriptor and a typed ``Record`` to a ``QueryClient`` and
provides find/remove/create/update/save, plus relation-scoped operations
for many-to-many join tables.

Usage:
    from db_repository import Record, Repository, CompositeRepository
    from db_repository import TableConfig, CompositeTableConfig
    from db_repository import get_adapter, get_repository, load_db_config
    from db_repository import NoResultError, ConfigurationError
"""

__version__ = "0.1.0"

# Adapters
from db_repository.adapters.base import QueryClient
from db_repository.adapters.postgres import AsyncPostgresAdapter

# Records and repositories
from db_repository.records import Record, is_empty, record_type_for
from db_repository.repository import Repository
from db_repository.composite import CompositeRepository

# Config
from db_repository.config.loader import load_db_config
from db_repository.config.models import (
    CompositeTableConfig,
    DatabaseConfig,
    DatabaseProfile,
    TableConfig,
)

# Factory
from db_repository.factory import get_adapter, get_repository, resolve_url

# Errors
from db_repository.errors import (
    ConfigurationError,
    NoResultError,
    ProfileNotFoundError,
    RepositoryError,
    TypeMismatchError,
)

__all__ = [
    # Adapters
    "QueryClient",
    "AsyncPostgresAdapter",
    # Records and repositories
    "Record",
    "is_empty",
    "record_type_for",
    "Repository",
    "CompositeRepository",
    # Config
    "load_db_config",
    "DatabaseConfig",
    "DatabaseProfile",
    "TableConfig",
    "CompositeTableConfig",
    # Factory
    "get_adapter",
    "get_repository",
    "resolve_url",
    # Errors
    "RepositoryError",
    "NoResultError",
    "ConfigurationError",
    "TypeMismatchError",
    "ProfileNotFoundError",
]
