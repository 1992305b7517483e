"""Query client adapters.

Provides the ``QueryClient`` Protocol and the async PostgreSQL adapter.

Usage:
    from db_repository.adapters import QueryClient, AsyncPostgresAdapter
"""

from db_repository.adapters.base import QueryClient
from db_repository.adapters.postgres import AsyncPostgresAdapter

__all__ = [
    "QueryClient",
    "AsyncPostgresAdapter",
]
