"""Record base class: one table row held in memory.

A ``Record`` subclass declares its columns as optional pydantic fields,
the fields that must be present on insert (``REQUIRED``) and the values
used to fill absent fields on insert (``DEFAULTS``).

Usage:
    from typing import Any
    from db_repository.records import Record

    class User(Record):
        DEFAULTS = {"email": "", "active": True}

        id: int | None = None
        name: str | None = None
        email: str | None = None
        active: bool | None = None

    user = User(name="Alice")
    user.prepare_for_insert()
    # {"name": "Alice", "email": "", "active": True}
"""

import copy
import types
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, create_model

from db_repository.errors import ConfigurationError

if TYPE_CHECKING:
    from db_repository.config.models import TableConfig


def is_empty(value: Any) -> bool:
    """Return True when ``value`` carries no information for storage.

    ``None``, ``False``, numeric zero, ``""``, ``"0"`` and empty
    containers are empty.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _is_integer_zero(value: Any) -> bool:
    return type(value) is int and value == 0


class Record(BaseModel):
    """In-memory representation of one table row.

    Constructing a Record with no attributes yields a blank record whose
    fields are filled from ``DEFAULTS`` on insert.  Constructing it with
    attributes requires the subclass to declare a non-empty ``DEFAULTS``
    mapping; keys must be declared fields.

    Rows read from storage go through ``from_row()`` instead, which skips
    the ``DEFAULTS`` check and ignores undeclared columns.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    REQUIRED: ClassVar[tuple[str, ...]] = ()
    DEFAULTS: ClassVar[dict[str, Any]] = {}

    def __init__(self, **attributes: Any) -> None:
        cls = type(self)
        if attributes:
            if not cls.DEFAULTS:
                raise ConfigurationError(f"{cls.__name__}.DEFAULTS cannot be empty")
            unknown = sorted(set(attributes) - set(cls.model_fields))
            if unknown:
                raise ConfigurationError(
                    f"Unknown fields for {cls.__name__}: {', '.join(unknown)}"
                )
        super().__init__(**attributes)

    @classmethod
    def create(cls, attributes: dict[str, Any] | None = None) -> "Record":
        """Build an unsaved record from an attribute mapping."""
        return cls(**(attributes or {}))

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Record":
        """Map a storage row onto a record without re-validating it."""
        known = {k: v for k, v in row.items() if k in cls.model_fields}
        return cls.model_construct(**known)

    @classmethod
    def field_names(cls) -> list[str]:
        """Declared field names, in declaration order."""
        return list(cls.model_fields)

    def to_dict(self) -> dict[str, Any]:
        """All attributes, unset ones included as ``None``."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def prepare_for_update(self) -> dict[str, Any]:
        """Attributes to write on update.

        Empty values are dropped so a partial record never blanks out
        columns it did not touch.  The integer ``0`` is kept.
        """
        return {
            k: v
            for k, v in self.to_dict().items()
            if not is_empty(v) or _is_integer_zero(v)
        }

    def prepare_for_insert(self) -> dict[str, Any]:
        """Attributes to write on insert.

        Non-empty attributes plus every declared default whose key is not
        already present.

        Raises:
            ConfigurationError: If a ``REQUIRED`` field is still missing.
        """
        data = {k: v for k, v in self.to_dict().items() if not is_empty(v)}
        for key, value in type(self).DEFAULTS.items():
            if key not in data:
                data[key] = copy.deepcopy(value)

        missing = [name for name in type(self).REQUIRED if name not in data]
        if missing:
            raise ConfigurationError(
                f"Missing required fields for {type(self).__name__}: {', '.join(missing)}"
            )
        return data


def record_type_for(config: "TableConfig") -> type[Record]:
    """Generate a Record subclass for a table declared only in configuration.

    Every configured field becomes an untyped optional attribute.  The
    class name is derived from the table name (``user_roles`` ->
    ``UserRolesRecord``).
    """
    class_name = "".join(part.capitalize() for part in config.table.split("_")) + "Record"

    class_vars = {
        "__module__": __name__,
        "DEFAULTS": dict(config.defaults),
        "REQUIRED": tuple(config.required),
    }
    base = types.new_class(
        f"{class_name}Base", (Record,), exec_body=lambda ns: ns.update(class_vars)
    )
    return create_model(
        class_name,
        __base__=base,
        __module__=__name__,
        **{name: (Any, None) for name in config.fields},
    )
