"""Query client protocol definition.

Defines the ``QueryClient`` Protocol that repositories issue their
queries through.  All methods are ``async def``.

Usage:
    from db_repository.adapters.base import QueryClient

    async def do_work(client: QueryClient) -> None:
        rows = await client.select("users", "id, name", limit=10)
        await client.insert("users", {"name": "Alice"})
        await client.update("users", {"name": "Bob"}, {"id": 1}, limit=1)
        await client.delete("users", {"id": 1}, limit=1)
        await client.close()
"""

from typing import Any, Protocol


class QueryClient(Protocol):
    """Query execution interface that all adapters must implement.

    Filters are equality conditions joined with AND.  ``limit=None``
    means unbounded.
    """

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """Select rows from table.

        Args:
            table: Table name.
            columns: Comma-separated column names (e.g., ``"id, name"``) or ``"*"``.
            filters: Optional dict of field=value filters (all must match via AND).
            order_by: Optional ordering expression (e.g., ``"id DESC"``).
            limit: Optional maximum number of rows.

        Returns:
            List of dicts, one per row.  Empty list if no matches.

        Example:
            rows = await client.select(
                "user_roles",
                "*",
                filters={"user_id": 5, "role_id": 2},
                order_by="id DESC",
                limit=1,
            )
        """
        ...

    async def insert(self, table: str, data: dict) -> dict:
        """Insert row into table and return the stored row.

        Args:
            table: Table name.
            data: Dict of field=value pairs to insert.

        Returns:
            Dict representing the stored row (includes generated keys).

        Raises:
            Exception: If duplicate key or constraint violation.
        """
        ...

    async def update(
        self,
        table: str,
        data: dict,
        filters: dict[str, Any],
        order_by: str | None = None,
        limit: int | None = None,
    ) -> int:
        """Update matching rows and return how many were changed.

        Args:
            table: Table name.
            data: Dict of field=value pairs to write.
            filters: Dict of field=value filters (all must match via AND).
            order_by: Ordering that decides which rows ``limit`` keeps.
            limit: Optional maximum number of rows to update.

        Returns:
            Number of updated rows.
        """
        ...

    async def delete(
        self,
        table: str,
        filters: dict[str, Any],
        limit: int | None = None,
    ) -> int:
        """Delete matching rows and return how many were removed.

        Args:
            table: Table name.
            filters: Dict of field=value filters (all must match via AND).
            limit: Optional maximum number of rows to delete.

        Returns:
            Number of deleted rows.
        """
        ...

    async def close(self) -> None:
        """Close the connection and release resources."""
        ...
