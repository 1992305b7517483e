"""Repository for join tables keyed by two foreign keys.

A composite table models a many-to-many relation between two other
tables.  Its rows carry a surrogate primary key plus a ``fk_from`` and
``fk_to`` column; relation operations are scoped by both foreign keys.

Usage:
    from db_repository import CompositeRepository, CompositeTableConfig

    user_roles = CompositeRepository(
        client,
        CompositeTableConfig(
            table="user_roles",
            fields=("id", "user_id", "role_id"),
            defaults={"user_id": 0, "role_id": 0},
            fk_from="user_id",
            fk_to="role_id",
        ),
    )

    link = user_roles.create_relation(5, 2)
    await user_roles.save_relation(link)
    latest = await user_roles.find_relation(5, 2)
    await user_roles.remove_relation(5, 2)
"""

import logging
from collections.abc import Sequence
from typing import Any

from db_repository.adapters.base import QueryClient
from db_repository.config.models import CompositeTableConfig
from db_repository.errors import ConfigurationError
from db_repository.records import Record, is_empty
from db_repository.repository import Repository

logger = logging.getLogger(__name__)


class CompositeRepository(Repository):
    """Repository for a two-foreign-key relation table.

    Both foreign-key conditions always win over ``extra_conditions``
    naming the same column.
    """

    def __init__(
        self,
        client: QueryClient,
        config: CompositeTableConfig,
        record_type: type[Record] | None = None,
    ) -> None:
        if not isinstance(config, CompositeTableConfig):
            raise ConfigurationError(
                f"Table '{config.table}' is not configured with fk_from/fk_to"
            )
        if record_type is None and not config.defaults:
            raise ConfigurationError(
                f"Composite table '{config.table}' needs non-empty defaults "
                f"to generate its Record type"
            )
        super().__init__(client, config, record_type)

        for fk in (config.fk_from, config.fk_to):
            if fk not in self.fields:
                raise ConfigurationError(
                    f"Foreign key '{fk}' is not a field of table '{config.table}'"
                )

    @property
    def fk_from(self) -> str:
        return self._config.fk_from

    @property
    def fk_to(self) -> str:
        return self._config.fk_to

    @property
    def _order_latest(self) -> str:
        return f"{self.primary_key} DESC"

    # ------------------------------------------------------------------
    # One-sided lookups
    # ------------------------------------------------------------------

    async def find_from(
        self,
        fk_from_value: Any = None,
        select_fields: str | Sequence[str] = "*",
        extra_conditions: dict[str, Any] | None = None,
        limit: int | None = 1,
    ) -> Record | list[Record]:
        """Find rows on the ``fk_from`` side of the relation.

        Raises:
            NoResultError: If no rows match.
        """
        conditions = dict(extra_conditions or {})
        if not is_empty(fk_from_value):
            conditions[self.fk_from] = fk_from_value
        return await self._select(select_fields, conditions, limit=limit)

    async def find_to(
        self,
        fk_to_value: Any = None,
        select_fields: str | Sequence[str] = "*",
        extra_conditions: dict[str, Any] | None = None,
        limit: int | None = 1,
    ) -> Record | list[Record]:
        """Find rows on the ``fk_to`` side of the relation.

        Raises:
            NoResultError: If no rows match.
        """
        conditions = dict(extra_conditions or {})
        if not is_empty(fk_to_value):
            conditions[self.fk_to] = fk_to_value
        return await self._select(select_fields, conditions, limit=limit)

    # ------------------------------------------------------------------
    # Relation operations
    # ------------------------------------------------------------------

    async def find_relation(
        self,
        fk_from_value: Any,
        fk_to_value: Any,
        select_fields: str | Sequence[str] = "*",
        extra_conditions: dict[str, Any] | None = None,
        limit: int | None = 1,
    ) -> Record | list[Record]:
        """Find rows linking both keys, most recent (highest primary key) first.

        Raises:
            ConfigurationError: If either foreign key value is empty.
            NoResultError: If no rows match.
        """
        conditions = self._relation_conditions(fk_from_value, fk_to_value, extra_conditions)
        return await self._select(
            select_fields, conditions, order_by=self._order_latest, limit=limit
        )

    async def remove_relation(
        self,
        fk_from_value: Any,
        fk_to_value: Any,
        extra_conditions: dict[str, Any] | None = None,
        limit: int | None = 1,
    ) -> int:
        """Delete up to ``limit`` rows linking both keys.

        Returns:
            Number of deleted rows.

        Raises:
            ConfigurationError: If either foreign key value is empty.
        """
        conditions = self._relation_conditions(fk_from_value, fk_to_value, extra_conditions)
        logger.debug(f"delete from {self.table} where {conditions} limit {limit}")
        return await self._client.delete(self.table, conditions, limit=limit)

    def create_relation(
        self,
        fk_from_value: Any,
        fk_to_value: Any,
        attributes: dict[str, Any] | None = None,
    ) -> Record:
        """Build a new, unsaved relation record.  No query is issued.

        Raises:
            ConfigurationError: If either foreign key value is empty, or if
                ``attributes`` tries to set a foreign-key column.
        """
        self._check_foreign_keys(fk_from_value, fk_to_value)
        attributes = dict(attributes or {})
        overridden = [fk for fk in (self.fk_from, self.fk_to) if fk in attributes]
        if overridden:
            raise ConfigurationError(
                f"Attributes cannot override foreign keys {overridden} on '{self.table}'"
            )
        attributes[self.fk_from] = fk_from_value
        attributes[self.fk_to] = fk_to_value
        return self._record_type.create(attributes)

    async def update_relation(
        self,
        record: Record,
        extra_conditions: dict[str, Any] | None = None,
        limit: int | None = 1,
    ) -> int:
        """Update the relation rows identified by the record's keys.

        The row is matched on both foreign keys, the primary key when set,
        and ``extra_conditions``.  The primary key is never written.

        Returns:
            Number of updated rows.

        Raises:
            TypeMismatchError: If ``record`` is not of the bound type.
            ConfigurationError: If either of the record's foreign keys is empty.
        """
        self._check_type(record)
        conditions = self._relation_conditions(
            getattr(record, self.fk_from),
            getattr(record, self.fk_to),
            extra_conditions,
        )
        pk_value = getattr(record, self.primary_key)
        if not is_empty(pk_value):
            conditions[self.primary_key] = pk_value

        data = record.prepare_for_update()
        data.pop(self.primary_key, None)

        logger.debug(f"update {self.table} set {data} where {conditions} limit {limit}")
        return await self._client.update(
            self.table, data, conditions, order_by=self._order_latest, limit=limit
        )

    async def save_relation(self, record: Record) -> Record:
        """Insert the relation record unconditionally.

        Returns:
            The stored row, with its storage-assigned primary key.

        Raises:
            TypeMismatchError: If ``record`` is not of the bound type.
        """
        self._check_type(record)
        return await self._insert(record)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_foreign_keys(self, fk_from_value: Any, fk_to_value: Any) -> None:
        if is_empty(fk_from_value) or is_empty(fk_to_value):
            logger.warning(f"Empty foreign key on relation operation for {self.table}")
            raise ConfigurationError("Foreign keys cannot be empty on composite table")

    def _relation_conditions(
        self,
        fk_from_value: Any,
        fk_to_value: Any,
        extra_conditions: dict[str, Any] | None,
    ) -> dict[str, Any]:
        self._check_foreign_keys(fk_from_value, fk_to_value)
        conditions = dict(extra_conditions or {})
        conditions[self.fk_from] = fk_from_value
        conditions[self.fk_to] = fk_to_value
        return conditions
