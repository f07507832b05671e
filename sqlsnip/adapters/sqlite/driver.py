import contextlib
import sqlite3
from collections.abc import Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from typing_extensions import TypeAlias

from sqlsnip.adapters.dialect import DialectAdapter
from sqlsnip.exceptions import QueryError
from sqlsnip.result import ResultSet
from sqlsnip.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("SqliteAdapter", "SqliteConnection", "SqliteCursor", "SqlitePreparedStatement")

SqliteConnection: TypeAlias = sqlite3.Connection

logger = get_logger("adapters.sqlite")


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


class SqlitePreparedStatement:
    """A generated query bound to a SQLite connection.

    ``sqlite3`` caches compiled statements per connection, so holding on to
    the SQL text and the connection is all that preparing needs.
    """

    __slots__ = ("adapter", "sql")

    def __init__(self, adapter: "SqliteAdapter", sql: str) -> None:
        self.adapter = adapter
        self.sql = sql

    def execute(self, parameters: "Mapping[str, Any]") -> ResultSet:
        """Execute the statement with parameters keyed by ``:label``.

        Raises:
            QueryError: When SQLite rejects the statement or its parameters.
        """
        bound = {self.adapter.strip_parameter_label(label): value for label, value in parameters.items()}
        with self.adapter.handle_database_exceptions(self.sql), SqliteCursor(self.adapter.connection) as cursor:
            cursor.execute(self.sql, bound)
            if cursor.description is None:
                return ResultSet(rows_affected=cursor.rowcount, last_inserted_id=cursor.lastrowid)
            column_names = [column[0] for column in cursor.description]
            rows = [dict(zip(column_names, row)) for row in cursor.fetchall()]
            return ResultSet(rows=rows, column_names=column_names, rows_affected=len(rows))

    def __repr__(self) -> str:
        return f"SqlitePreparedStatement(sql={self.sql!r})"


class SqliteAdapter(DialectAdapter):
    """Adapter for a synchronous SQLite connection."""

    def __init__(self, connection: "SqliteConnection") -> None:
        super().__init__(dialect="sqlite")
        self.connection = connection

    def get_statement(self, sql: str) -> SqlitePreparedStatement:
        logger.debug("Preparing SQLite statement: %s", sql)
        return SqlitePreparedStatement(self, sql)

    @contextmanager
    def handle_database_exceptions(self, sql: "Optional[str]" = None) -> "Generator[None, None, None]":
        """Re-raise SQLite errors as :class:`QueryError`."""
        try:
            yield
        except sqlite3.Error as e:
            msg = f"SQLite database error: {e}"
            raise QueryError(msg, sql=sql) from e
