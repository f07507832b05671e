"""SQLite database configuration."""

import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

from typing_extensions import NotRequired

from sqlsnip.adapters.sqlite.driver import SqliteAdapter, SqliteConnection
from sqlsnip.config import NoPoolSyncConfig
from sqlsnip.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

logger = get_logger("adapters.sqlite.config")

__all__ = ("SqliteConfig", "SqliteConnectionParams")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig(NoPoolSyncConfig[SqliteConnection, SqliteAdapter]):
    """SQLite configuration. Uses an in-memory database unless told otherwise."""

    adapter_type: "ClassVar[type[SqliteAdapter]]" = SqliteAdapter
    connection_type: "ClassVar[type[SqliteConnection]]" = SqliteConnection

    def __init__(self, *, connection_config: "Optional[Union[SqliteConnectionParams, dict[str, Any]]]" = None) -> None:
        """Initialize SQLite configuration.

        Args:
            connection_config: Keyword arguments for :func:`sqlite3.connect`.
        """
        super().__init__(connection_config=dict(connection_config or {}))
        self.connection_config.setdefault("database", ":memory:")
        database = str(self.connection_config["database"])
        if database.startswith("file:") and not self.connection_config.get("uri"):
            logger.debug("Database URI detected (%s) but uri=True not set. Enabling URI mode.", database)
            self.connection_config["uri"] = True

    def create_connection(self) -> SqliteConnection:
        """Open a new SQLite connection with rows returned as tuples."""
        return sqlite3.connect(**self.connection_config)

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[SqliteConnection, None, None]":
        """Provide a connection that is committed on success, rolled back on error, then closed."""
        connection = self.create_connection()
        try:
            yield connection
        except Exception:
            connection.rollback()
            raise
        else:
            connection.commit()
        finally:
            connection.close()

    @contextmanager
    def provide_adapter(self, *args: Any, **kwargs: Any) -> "Generator[SqliteAdapter, None, None]":
        """Provide a :class:`SqliteAdapter` over a fresh connection."""
        with self.provide_connection(*args, **kwargs) as connection:
            yield self.adapter_type(connection)
