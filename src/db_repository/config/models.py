"""Pydantic models for connection profiles and table descriptors."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Connection Profiles
# ============================================================================


class DatabaseProfile(BaseModel):
    """Database connection profile from db.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    provider: str = "postgres"
    jsonb_columns: list[str] = Field(default_factory=list)


# ============================================================================
# Table Descriptors
# ============================================================================


class TableConfig(BaseModel):
    """Descriptor binding a repository to one table.

    ``fields`` may be left empty when the repository is built with a
    hand-written Record type; the repository then takes the Record's
    declared fields.  ``defaults`` and ``required`` are only used when the
    Record type is generated from this descriptor.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    table: str = Field(min_length=1)
    primary_key: str = "id"
    fields: tuple[str, ...] = ()
    defaults: dict[str, Any] = Field(default_factory=dict)
    required: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_fields(self) -> "TableConfig":
        if len(set(self.fields)) != len(self.fields):
            raise ValueError(f"Duplicate field names for table '{self.table}'")
        if self.fields and self.primary_key not in self.fields:
            raise ValueError(
                f"Primary key '{self.primary_key}' is not a field of table '{self.table}'"
            )
        return self


class CompositeTableConfig(TableConfig):
    """Descriptor for a join table keyed by two foreign keys."""

    fk_from: str = Field(min_length=1)
    fk_to: str = Field(min_length=1)

    @model_validator(mode="after")
    def _check_foreign_keys(self) -> "CompositeTableConfig":
        if self.fk_from == self.fk_to:
            raise ValueError(f"fk_from and fk_to must differ on table '{self.table}'")
        if self.primary_key in (self.fk_from, self.fk_to):
            raise ValueError(
                f"Primary key of table '{self.table}' cannot be one of its foreign keys"
            )
        if self.fields:
            for fk in (self.fk_from, self.fk_to):
                if fk not in self.fields:
                    raise ValueError(f"Foreign key '{fk}' is not a field of table '{self.table}'")
        return self


# ============================================================================
# Complete Configuration
# ============================================================================


class DatabaseConfig(BaseModel):
    """Complete configuration from db.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    tables: dict[str, CompositeTableConfig | TableConfig] = Field(default_factory=dict)
