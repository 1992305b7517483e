"""Exceptions raised by repositories and the configuration layer.

Every error derives from ``RepositoryError`` so callers can catch the
whole family with a single ``except`` clause.  Query failures raised by
the underlying adapter (SQLAlchemy, asyncpg) are not wrapped and
propagate unchanged.
"""


class RepositoryError(Exception):
    """Base class for all db-repository errors."""

    pass


class NoResultError(RepositoryError):
    """Raised when a find operation matches zero rows."""

    def __init__(self, table: str, conditions: dict | None = None) -> None:
        self.table = table
        self.conditions = dict(conditions or {})
        super().__init__(f"No results in '{table}' for conditions: {self.conditions}")


class ConfigurationError(RepositoryError, ValueError):
    """Raised for programmer errors detected before any query is issued.

    Examples: empty remove conditions, updating a record without a
    primary key, empty foreign keys on a relation operation, or a Record
    type without a ``DEFAULTS`` declaration.
    """

    pass


class TypeMismatchError(RepositoryError, TypeError):
    """Raised when a record of the wrong type is passed to a repository."""

    def __init__(self, expected: type, actual: type) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected record of type {expected.__name__}, got {actual.__name__}"
        )


class ProfileNotFoundError(RepositoryError):
    """Raised when no database profile is configured."""

    pass
