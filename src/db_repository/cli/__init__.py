"""CLI for inspecting configured profiles and tables.

Usage:
    db-repository profiles
    db-repository tables
    DB_PROFILE=local db-repository find users 42
    db-repository --config ./db.toml find user_roles 7 --fields "id, user_id"

Commands:
    profiles  - List available profiles
    tables    - List configured tables and their keys
    find      - Look up one row by primary key
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from db_repository.composite import CompositeRepository
from db_repository.config.loader import load_db_config
from db_repository.config.models import CompositeTableConfig
from db_repository.errors import ConfigurationError, NoResultError, ProfileNotFoundError
from db_repository.factory import get_adapter, get_repository
from db_repository.records import is_empty

console = Console()


def _config_path(args: argparse.Namespace) -> Path | None:
    return Path(args.config) if args.config else None


def _coerce_id(value: str) -> int | str:
    # asyncpg binds parameters strictly; integer keys must arrive as int
    return int(value) if value.lstrip("-").isdigit() else value


# ============================================================================
# Async command implementation
# ============================================================================


async def _async_find(args: argparse.Namespace) -> int:
    """Look up one row by primary key and print it."""
    record_id = _coerce_id(args.id)
    if is_empty(record_id):
        console.print(
            f"[red]Error: primary key value cannot be empty (got '{escape(args.id)}')[/red]"
        )
        return 1

    try:
        config = load_db_config(_config_path(args))
        adapter = await get_adapter(
            args.profile,
            env_prefix=args.env_prefix,
            config_path=_config_path(args),
        )
    except (FileNotFoundError, ValidationError, ProfileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    try:
        repository = get_repository(adapter, args.table, config)
        record = await repository.find(record_id, select_fields=args.fields)
    except (ConfigurationError, NoResultError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    finally:
        await adapter.close()

    kind = "relation" if isinstance(repository, CompositeRepository) else "row"
    table = Table(title=f"{repository.table} {kind}", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    for name, value in record.to_dict().items():
        table.add_row(name, "" if value is None else str(value))

    console.print(table)
    return 0


# ============================================================================
# Sync command wrappers (cmd_profiles, cmd_tables read local files only)
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from db.toml.

    Returns:
        0 on success, 1 if db.toml not found.
    """
    try:
        config = load_db_config(_config_path(args))
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    current = os.environ.get(f"{args.env_prefix}DB_PROFILE")

    table = Table(title="Database Profiles", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Profile")
    table.add_column("Provider")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[bold green]*[/bold green]" if name == current else " "
        table.add_row(
            marker,
            f"[bold cyan]{name}[/bold cyan]" if name == current else name,
            profile.provider,
            profile.description or "",
        )

    console.print(table)

    if current:
        console.print("\n[bold green]*[/bold green] = current profile")

    return 0


def cmd_tables(args: argparse.Namespace) -> int:
    """List tables declared in db.toml.

    Returns:
        0 on success, 1 if db.toml not found.
    """
    try:
        config = load_db_config(_config_path(args))
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    if not config.tables:
        console.print("[yellow]No tables configured.[/yellow]")
        return 0

    table = Table(title="Configured Tables", show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Primary key")
    table.add_column("Fields")
    table.add_column("Relation")

    for name, table_config in config.tables.items():
        if isinstance(table_config, CompositeTableConfig):
            kind = "composite"
            relation = f"{table_config.fk_from} -> {table_config.fk_to}"
        else:
            kind = "table"
            relation = ""
        table.add_row(
            name,
            kind,
            table_config.primary_key,
            ", ".join(table_config.fields),
            relation,
        )

    console.print(table)
    return 0


def cmd_find(args: argparse.Namespace) -> int:
    """Look up one row by primary key.

    Wraps the async implementation with ``asyncio.run()``.

    Returns:
        0 on success, 1 on failure or no result.
    """
    return asyncio.run(_async_find(args))


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="db-repository",
        description="Inspect db-repository profiles and tables",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to db.toml (default: ./db.toml)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_DB_PROFILE)"
        ),
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_profiles = subparsers.add_parser("profiles", help="List available profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    p_tables = subparsers.add_parser("tables", help="List configured tables")
    p_tables.set_defaults(func=cmd_tables)

    p_find = subparsers.add_parser("find", help="Look up one row by primary key")
    p_find.add_argument("table", help="Table name as declared in db.toml")
    p_find.add_argument("id", help="Primary key value")
    p_find.add_argument(
        "--fields",
        default="*",
        help='Comma-separated columns to select (default: "*")',
    )
    p_find.add_argument(
        "--profile",
        "-p",
        default=None,
        help="Profile to connect with (default: DB_PROFILE)",
    )
    p_find.set_defaults(func=cmd_find)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
