"""Database schema migrations for git-kit."""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ..models.types import ConfigStatus
from ..utils.errors import PersistConfigurationError
from ..utils.logger import Logger


@dataclass
class DefaultConfigs:
    """Bundled config files registered on first run."""
    default: Path
    conventional: Path


@dataclass
class MigrationContext:
    default_configs: Optional[DefaultConfigs] = None
    version: Optional[int] = None


def _create_branch_table(conn: sqlite3.Connection, ctx: MigrationContext) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS branch (
            name TEXT NOT NULL PRIMARY KEY,
            ticket TEXT,
            data BLOB,
            created TEXT NOT NULL
        )
        """
    )


def _create_config_table(conn: sqlite3.Connection, ctx: MigrationContext) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS config (
            key TEXT NOT NULL PRIMARY KEY,
            path TEXT NOT NULL,
            status TEXT NOT NULL
        )
        """
    )


def _add_branch_link_and_scope(conn: sqlite3.Connection, ctx: MigrationContext) -> None:
    columns = {row[1] for row in conn.execute("PRAGMA table_info(branch)")}
    for column in ("link", "scope"):
        if column not in columns:
            conn.execute(f"ALTER TABLE branch ADD COLUMN {column} TEXT")


def _seed_default_configs(conn: sqlite3.Connection, ctx: MigrationContext) -> None:
    if ctx.default_configs is None:
        return

    # Only the first seeded row becomes active, an existing selection wins.
    has_active = conn.execute(
        "SELECT 1 FROM config WHERE status = ?", (ConfigStatus.ACTIVE.value,)
    ).fetchone()

    seeds = [
        ("default", ctx.default_configs.default, ConfigStatus.ACTIVE),
        ("conventional", ctx.default_configs.conventional, ConfigStatus.DISABLED),
    ]
    for key, path, status in seeds:
        if has_active and status == ConfigStatus.ACTIVE:
            status = ConfigStatus.DISABLED
        conn.execute(
            "INSERT OR IGNORE INTO config (key, path, status) VALUES (?, ?, ?)",
            (key, str(path), status.value),
        )


MIGRATIONS: List[Callable[[sqlite3.Connection, MigrationContext], None]] = [
    _create_branch_table,
    _create_config_table,
    _add_branch_link_and_scope,
    _seed_default_configs,
]


def current_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def db_migrations(conn: sqlite3.Connection, ctx: Optional[MigrationContext] = None) -> int:
    """
    Apply pending migrations in order and return the resulting version.

    The applied version is tracked with ``PRAGMA user_version``; every step is
    idempotent so a partially migrated database can be migrated again.
    """
    ctx = ctx or MigrationContext()
    target = len(MIGRATIONS) if ctx.version is None else ctx.version

    if not 0 <= target <= len(MIGRATIONS):
        raise PersistConfigurationError(f"Unknown migration version '{target}'")

    try:
        version = current_version(conn)
    except sqlite3.Error as e:
        raise PersistConfigurationError(f"Failed to read migration version: {e}") from e

    if version >= target:
        Logger.debug(f"git-kit migration version '{version}'")
        return version

    try:
        with conn:
            for step, migration in enumerate(MIGRATIONS[version:target], start=version + 1):
                Logger.debug(f"applying migration {step}: {migration.__name__}")
                migration(conn, ctx)
            conn.execute(f"PRAGMA user_version = {target}")
    except sqlite3.Error as e:
        raise PersistConfigurationError(f"Failed to apply migration version '{target}': {e}") from e

    Logger.info(f"git-kit migration version '{target}'")
    return target
