"""Load profiles and table descriptors from a TOML file."""

import tomllib
from pathlib import Path

from db_repository.config.models import (
    CompositeTableConfig,
    DatabaseConfig,
    DatabaseProfile,
    TableConfig,
)


def load_db_config(config_path: Path | None = None) -> DatabaseConfig:
    """Load database configuration from TOML file.

    ``[profiles.<name>]`` sections become ``DatabaseProfile`` entries.
    ``[tables.<name>]`` sections become ``TableConfig`` entries, or
    ``CompositeTableConfig`` when they declare ``fk_from``/``fk_to``.  The
    table name defaults to the section name.

    Args:
        config_path: Path to db.toml (default: ``./db.toml`` in the current
            working directory).

    Returns:
        DatabaseConfig with all profiles and tables.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If a section is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / "db.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Database config not found: {config_path}\n"
            f"Create a db.toml with [profiles.<name>] and [tables.<name>] sections."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = DatabaseProfile(**profile_data)

    tables: dict[str, TableConfig] = {}
    for name, table_data in data.get("tables", {}).items():
        table_data = {"table": name, **table_data}
        if "fk_from" in table_data or "fk_to" in table_data:
            tables[name] = CompositeTableConfig(**table_data)
        else:
            tables[name] = TableConfig(**table_data)

    return DatabaseConfig(profiles=profiles, tables=tables)
