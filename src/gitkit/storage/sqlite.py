"""SQLite persistence for git-kit."""

import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..models.types import Branch, Config, ConfigKey, ConfigStatus, branch_key
from ..utils.errors import (
    CorruptedError, NotFoundError, PersistConfigurationError, PersistError,
    PersistValidationError
)
from ..utils.logger import Logger
from .migrations import MigrationContext, db_migrations


class Store(ABC):
    """Persistence operations used by git-kit commands."""

    @abstractmethod
    def persist_branch(self, branch: Branch) -> None:
        pass

    @abstractmethod
    def get_branch(self, branch: str, repo: str) -> Branch:
        pass

    @abstractmethod
    def persist_config(self, config: Config) -> None:
        pass

    @abstractmethod
    def set_active_config(self, key: Union[str, ConfigKey]) -> Config:
        pass

    @abstractmethod
    def get_configuration(self, key: Optional[Union[str, ConfigKey]] = None) -> Config:
        pass

    @abstractmethod
    def get_configurations(self) -> List[Config]:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


def _translate(name: str, message: str, error: sqlite3.Error) -> PersistError:
    """Map a sqlite3 error onto the git-kit persistence errors."""
    Logger.error(f"{message}\n{error}")

    if isinstance(error, (sqlite3.IntegrityError, sqlite3.ProgrammingError,
                          sqlite3.InterfaceError)):
        return PersistValidationError(f"{message} ({name}): {error}")
    if isinstance(error, sqlite3.DataError):
        return CorruptedError(name, str(error))
    return PersistError(f"{message}: {error}")


class SqliteStore(Store):
    """Stores branches and registered configs in a local SQLite database."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection
        self.connection.row_factory = sqlite3.Row

    @classmethod
    def open(
        cls,
        db_path: Union[str, Path],
        ctx: Optional[MigrationContext] = None
    ) -> 'SqliteStore':
        """Open (creating if needed) and migrate the database at ``db_path``."""
        db_path = str(db_path)
        try:
            if db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(db_path)
        except (OSError, sqlite3.Error) as e:
            raise PersistConfigurationError(f"Failed to open sqlite connection at '{db_path}': {e}") from e

        Logger.debug(f"Opened database connection: {db_path}")
        store = cls(connection)
        try:
            db_migrations(connection, ctx)
        except PersistError:
            connection.close()
            raise
        return store

    def persist_branch(self, branch: Branch) -> None:
        Logger.info(f"insert or update for '{branch.name}' branch with ticket '{branch.ticket}'")

        try:
            with self.connection:
                self.connection.execute(
                    "REPLACE INTO branch (name, ticket, data, created, link, scope) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        branch.name,
                        branch.ticket,
                        branch.data,
                        branch.created.isoformat(),
                        branch.link,
                        branch.scope,
                    ),
                )
        except sqlite3.Error as e:
            raise _translate("branch", f"Failed to update branch '{branch.name}'", e) from e

    def get_branch(self, branch: str, repo: str) -> Branch:
        name = branch_key(branch, repo)
        Logger.info(f"retrieve branch '{name}' for repo '{repo.strip()}'")

        try:
            row = self.connection.execute(
                "SELECT name, ticket, data, created, link, scope FROM branch WHERE name = ?",
                (name,),
            ).fetchone()
        except sqlite3.Error as e:
            raise _translate("branch", f"Failed to retrieve branch '{name}'", e) from e

        if row is None:
            raise NotFoundError(f"No stored context for branch '{name}'")

        return self._branch_from_row(row)

    def persist_config(self, config: Config) -> None:
        if config.key.is_reserved:
            raise PersistValidationError(f"Cannot override reserved '{config.key}' config!")

        Logger.info(f"insert or update user config '{config.key}' path '{config.path}'")

        try:
            with self.connection:
                self.connection.execute(
                    "REPLACE INTO config (key, path, status) VALUES (?, ?, ?)",
                    (str(config.key), str(config.path), config.status.value),
                )
        except sqlite3.Error as e:
            raise _translate("config", "Failed to update config.", e) from e

    def set_active_config(self, key: Union[str, ConfigKey]) -> Config:
        """
        Make ``key`` the only active config.

        Runs as one transaction: the target must exist, every active row is
        disabled and the target activated. Nothing changes if any step fails.
        """
        key = str(ConfigKey.parse(key))
        active, disabled = ConfigStatus.ACTIVE.value, ConfigStatus.DISABLED.value

        try:
            with self.connection:
                exists = self.connection.execute(
                    "SELECT 1 FROM config WHERE key = ?", (key,)
                ).fetchone()
                if exists is None:
                    raise NotFoundError(f"Configuration '{key}' does not exist.")

                self.connection.execute(
                    "UPDATE config SET status = ? WHERE status = ?", (disabled, active)
                )
                self.connection.execute(
                    "UPDATE config SET status = ? WHERE key = ?", (active, key)
                )
        except sqlite3.Error as e:
            raise _translate("config", f"Failed to update config status to '{active}'.", e) from e

        Logger.info(f"config '{key}' set to '{active}'")
        return self.get_configuration(key)

    def get_configuration(self, key: Optional[Union[str, ConfigKey]] = None) -> Config:
        try:
            if key is None:
                row = self.connection.execute(
                    "SELECT key, path, status FROM config WHERE status = ?",
                    (ConfigStatus.ACTIVE.value,),
                ).fetchone()
            else:
                row = self.connection.execute(
                    "SELECT key, path, status FROM config WHERE key = ?",
                    (str(ConfigKey.parse(key)),),
                ).fetchone()
        except sqlite3.Error as e:
            raise _translate("config", "Failed to retrieve config.", e) from e

        if row is None:
            if key is None:
                raise NotFoundError("No 'active' config found.")
            raise NotFoundError(f"Configuration '{key}' does not exist.")

        return self._config_from_row(row)

    def get_configurations(self) -> List[Config]:
        try:
            rows = self.connection.execute(
                "SELECT key, path, status FROM config ORDER BY key"
            ).fetchall()
        except sqlite3.Error as e:
            raise _translate("config", "Failed to retrieve configs", e) from e

        return [self._config_from_row(row) for row in rows]

    def close(self) -> None:
        Logger.debug("closing sqlite connection")
        try:
            self.connection.close()
        except sqlite3.Error as e:
            raise PersistError(f"Failed to close 'git-kit' connection: {e}") from e

    @staticmethod
    def _branch_from_row(row: sqlite3.Row) -> Branch:
        try:
            created = datetime.fromisoformat(row["created"])
        except (TypeError, ValueError) as e:
            Logger.error(f"Corrupted data failed to convert to datetime, {e}")
            raise CorruptedError("branch", f"invalid created timestamp {row['created']!r}") from e

        return Branch(
            name=row["name"],
            ticket=row["ticket"],
            data=row["data"],
            created=created,
            link=row["link"],
            scope=row["scope"],
        )

    @staticmethod
    def _config_from_row(row: sqlite3.Row) -> Config:
        try:
            status = ConfigStatus(row["status"])
        except ValueError as e:
            Logger.error(f"Corrupted data failed to convert to valid config status, {e}")
            raise CorruptedError("config", f"invalid status {row['status']!r}") from e

        if not row["path"]:
            raise CorruptedError("config", f"missing path for '{row['key']}'")

        return Config(key=row["key"], path=Path(row["path"]), status=status)
