"""Query client and repository factory.

Resolves the active connection profile from ``db.toml`` and builds
adapters and repositories from configuration.

Profile resolution order:
1. Explicit ``profile_name`` argument
2. ``{env_prefix}DB_PROFILE`` environment variable
3. Raise ``ProfileNotFoundError``
"""

import logging
import os
from pathlib import Path
from urllib.parse import quote

from db_repository.adapters.base import QueryClient
from db_repository.adapters.postgres import AsyncPostgresAdapter
from db_repository.composite import CompositeRepository
from db_repository.config.loader import load_db_config
from db_repository.config.models import (
    CompositeTableConfig,
    DatabaseConfig,
    DatabaseProfile,
)
from db_repository.errors import ConfigurationError, ProfileNotFoundError
from db_repository.records import Record
from db_repository.repository import Repository

logger = logging.getLogger(__name__)


# ============================================================================
# Profile Resolution
# ============================================================================


def get_active_profile_name(env_prefix: str = "") -> str:
    """Get active profile name from the environment.

    Args:
        env_prefix: Prefix for the environment variable
            (``"APP_"`` reads ``APP_DB_PROFILE``).

    Returns:
        Profile name.

    Raises:
        ProfileNotFoundError: If no profile is configured.
    """
    env_var = f"{env_prefix}DB_PROFILE"
    env_profile = os.environ.get(env_var)
    if env_profile:
        return env_profile

    raise ProfileNotFoundError(
        "No database profile configured.\n"
        f"Set {env_var}=<name> or pass a profile name explicitly."
    )


def get_active_profile(
    profile_name: str | None = None,
    env_prefix: str = "",
    config: DatabaseConfig | None = None,
    config_path: Path | None = None,
) -> tuple[str, DatabaseProfile]:
    """Get active profile name and configuration.

    Returns:
        Tuple of (profile_name, DatabaseProfile).

    Raises:
        ProfileNotFoundError: If no profile is configured, or the named
            profile is not in db.toml.
    """
    if profile_name is None:
        profile_name = get_active_profile_name(env_prefix)
    if config is None:
        config = load_db_config(config_path)

    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys()) or "(none)"
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found in db.toml.\n"
            f"Available profiles: {available}"
        )

    return profile_name, config.profiles[profile_name]


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Replaces the ``[YOUR-PASSWORD]`` placeholder with the URL-quoted
    ``db_password``.
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


# ============================================================================
# Builders
# ============================================================================


async def get_adapter(
    profile_name: str | None = None,
    env_prefix: str = "",
    database_url: str | None = None,
    jsonb_columns: list[str] | None = None,
    config_path: Path | None = None,
) -> AsyncPostgresAdapter:
    """Create a query client for a profile or a direct URL.

    A new adapter is created on every call; the caller owns it and must
    ``await adapter.close()``.

    Args:
        profile_name: Profile from db.toml.  Ignored when ``database_url``
            is given.
        env_prefix: Prefix for the ``DB_PROFILE`` environment variable.
        database_url: Direct connection URL, bypassing db.toml.
        jsonb_columns: JSONB columns; defaults to the profile's list.
        config_path: Path to db.toml.

    Raises:
        ProfileNotFoundError: If no profile can be resolved.
        ConfigurationError: If the profile's provider is not supported.
    """
    if database_url is not None:
        return AsyncPostgresAdapter(database_url=database_url, jsonb_columns=jsonb_columns)

    name, profile = get_active_profile(
        profile_name, env_prefix=env_prefix, config_path=config_path
    )
    if profile.provider != "postgres":
        raise ConfigurationError(
            f"Profile '{name}' uses unsupported provider '{profile.provider}'"
        )

    logger.debug(f"Creating adapter for profile '{name}'")
    return AsyncPostgresAdapter(
        database_url=resolve_url(profile),
        jsonb_columns=jsonb_columns if jsonb_columns is not None else profile.jsonb_columns,
    )


def get_repository(
    client: QueryClient,
    table_name: str,
    config: DatabaseConfig,
    record_type: type[Record] | None = None,
) -> Repository:
    """Build the repository for a table declared in configuration.

    Tables declared with ``fk_from``/``fk_to`` yield a
    ``CompositeRepository``.

    Raises:
        ConfigurationError: If ``table_name`` is not configured.
    """
    if table_name not in config.tables:
        available = ", ".join(config.tables.keys()) or "(none)"
        raise ConfigurationError(
            f"Table '{table_name}' not found in db.toml. Available tables: {available}"
        )

    table_config = config.tables[table_name]
    if isinstance(table_config, CompositeTableConfig):
        return CompositeRepository(client, table_config, record_type)
    return Repository(client, table_config, record_type)
