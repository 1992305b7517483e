"""Generic per-table repository.

A ``Repository`` binds a ``TableConfig`` (table, primary key, fields) and
a ``Record`` type to a ``QueryClient`` and exposes find/remove/create/
update/save over that table.

Usage:
    from db_repository import Repository, TableConfig

    users = Repository(
        client,
        TableConfig(table="users", primary_key="id"),
        User,
    )

    user = users.create({"name": "Alice"})
    user = await users.save(user)          # insert, returns stored row
    user = await users.find(user.id)
    user.email = "alice@example.com"
    await users.save(user)                 # update by primary key
    await users.remove({"id": user.id})
"""

import logging
from collections.abc import Sequence
from typing import Any

from db_repository.adapters.base import QueryClient
from db_repository.config.models import TableConfig
from db_repository.errors import ConfigurationError, NoResultError, TypeMismatchError
from db_repository.records import Record, is_empty, record_type_for

logger = logging.getLogger(__name__)


def _columns(select_fields: str | Sequence[str]) -> str:
    if isinstance(select_fields, str):
        return select_fields
    return ", ".join(select_fields)


class Repository:
    """CRUD accessor for one table.

    Args:
        client: Query client that executes the generated queries.
        config: Table descriptor.  When ``config.fields`` is empty the
            fields declared on ``record_type`` are used.
        record_type: Record subclass produced by this repository.  When
            omitted, one is generated from ``config``.

    Raises:
        ConfigurationError: If a configured field is not declared on the
            Record type, or the primary key is not one of the fields.
    """

    def __init__(
        self,
        client: QueryClient,
        config: TableConfig,
        record_type: type[Record] | None = None,
    ) -> None:
        if record_type is None:
            if not config.fields:
                raise ConfigurationError(
                    f"Table '{config.table}' needs declared fields or a Record type"
                )
            record_type = record_type_for(config)

        declared = record_type.field_names()
        fields = tuple(config.fields) or tuple(declared)
        unknown = [name for name in fields if name not in declared]
        if unknown:
            raise ConfigurationError(
                f"Fields {unknown} of table '{config.table}' are not declared "
                f"on {record_type.__name__}"
            )
        if config.primary_key not in fields:
            raise ConfigurationError(
                f"Primary key '{config.primary_key}' is not a field of table '{config.table}'"
            )

        self._client = client
        self._config = config
        self._record_type = record_type
        self._fields = fields

    # ------------------------------------------------------------------
    # Descriptor
    # ------------------------------------------------------------------

    @property
    def table(self) -> str:
        return self._config.table

    @property
    def primary_key(self) -> str:
        return self._config.primary_key

    @property
    def fields(self) -> tuple[str, ...]:
        return self._fields

    @property
    def record_type(self) -> type[Record]:
        return self._record_type

    def get_table(self) -> str:
        return self.table

    def get_pk(self) -> str:
        return self.primary_key

    def get_fields(self) -> tuple[str, ...]:
        return self.fields

    def prefix_field(self, field: str) -> str:
        """Qualify ``field`` with the table name (``users.email``).

        Raises:
            ConfigurationError: If ``field`` is not declared on this table.
        """
        if field not in self._fields:
            raise ConfigurationError(f"'{field}' is not a field of table '{self.table}'")
        return f"{self.table}.{field}"

    def join_cond(self, other: "Repository") -> str:
        """Equality join predicate on ``other``'s primary key.

        The key column is qualified on both tables, so it must be a field
        of this table as well (typically a foreign key of the same name).

        Example:
            >>> user_roles.join_cond(users)
            'user_roles.user_id = users.user_id'
        """
        key = other.primary_key
        return f"{self.prefix_field(key)} = {other.prefix_field(key)}"

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def find(
        self,
        id: Any = None,
        select_fields: str | Sequence[str] = "*",
        extra_conditions: dict[str, Any] | None = None,
        limit: int | None = 1,
    ) -> Record | list[Record]:
        """Find rows by primary key and/or extra conditions.

        The primary-key condition is only added when ``id`` is non-empty.

        Returns:
            A single Record when ``limit == 1``, otherwise a list of
            Records in storage order.

        Raises:
            NoResultError: If no rows match.
        """
        conditions = dict(extra_conditions or {})
        if not is_empty(id):
            conditions[self.primary_key] = id
        return await self._select(select_fields, conditions, limit=limit)

    async def remove(self, conditions: dict[str, Any], limit: int | None = 1) -> int:
        """Delete up to ``limit`` rows matching ``conditions``.

        Returns:
            Number of deleted rows.

        Raises:
            ConfigurationError: If ``conditions`` is empty.
        """
        if not conditions:
            logger.warning(f"Refusing unconditional delete on {self.table}")
            raise ConfigurationError("Conditions cannot be empty on remove")

        logger.debug(f"delete from {self.table} where {conditions} limit {limit}")
        return await self._client.delete(self.table, dict(conditions), limit=limit)

    def create(self, attributes: dict[str, Any] | None = None) -> Record:
        """Build a new, unsaved record.  No query is issued."""
        return self._record_type.create(attributes)

    async def update(self, record: Record, limit: int | None = 1) -> int:
        """Write the record's non-empty attributes to the row with its primary key.

        Returns:
            Number of updated rows.

        Raises:
            TypeMismatchError: If ``record`` is not of the bound type.
            ConfigurationError: If the record's primary key is empty.
        """
        self._check_type(record)
        pk_value = getattr(record, self.primary_key)
        if is_empty(pk_value):
            logger.warning(f"Refusing update on {self.table} without primary key")
            raise ConfigurationError("Cannot update without primary key")

        data = record.prepare_for_update()
        filters = {self.primary_key: pk_value}
        logger.debug(f"update {self.table} set {data} where {filters} limit {limit}")
        return await self._client.update(self.table, data, filters, limit=limit)

    async def save(self, record: Record) -> Record:
        """Insert a new record, or update it when its primary key is set.

        Returns:
            The stored row for an insert (with storage-assigned keys), or
            ``record`` itself for an update.

        Raises:
            TypeMismatchError: If ``record`` is not of the bound type.
        """
        self._check_type(record)
        if not is_empty(getattr(record, self.primary_key)):
            await self.update(record, 1)
            return record
        return await self._insert(record)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_type(self, record: Record) -> None:
        if type(record) is not self._record_type:
            raise TypeMismatchError(self._record_type, type(record))

    async def _select(
        self,
        select_fields: str | Sequence[str],
        conditions: dict[str, Any],
        order_by: str | None = None,
        limit: int | None = 1,
    ) -> Record | list[Record]:
        logger.debug(
            f"select from {self.table} where {conditions} order by {order_by} limit {limit}"
        )
        rows = await self._client.select(
            self.table,
            _columns(select_fields),
            filters=conditions,
            order_by=order_by,
            limit=limit,
        )
        return self._process_result(rows, conditions, limit)

    async def _insert(self, record: Record) -> Record:
        data = record.prepare_for_insert()
        logger.debug(f"insert into {self.table}: {data}")
        row = await self._client.insert(self.table, data)
        return self._record_type.from_row(row)

    def _process_result(
        self,
        rows: list[dict],
        conditions: dict[str, Any],
        limit: int | None,
    ) -> Record | list[Record]:
        if not rows:
            raise NoResultError(self.table, conditions)
        if limit == 1:
            return self._record_type.from_row(rows[0])
        return [self._record_type.from_row(row) for row in rows]
