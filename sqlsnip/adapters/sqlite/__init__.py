"""SQLite adapter for sqlsnip."""

from sqlsnip.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlsnip.adapters.sqlite.driver import SqliteAdapter, SqliteConnection, SqliteCursor, SqlitePreparedStatement

__all__ = (
    "SqliteAdapter",
    "SqliteConfig",
    "SqliteConnection",
    "SqliteConnectionParams",
    "SqliteCursor",
    "SqlitePreparedStatement",
)
