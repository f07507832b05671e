"""Result of executing a prepared statement."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional, Union

__all__ = ("ResultSet",)


@dataclass
class ResultSet:
    """Rows and counters returned by an adapter.

    Rows are dictionaries keyed by column name. Data modification statements
    return no rows but report ``rows_affected`` and, for inserts,
    ``last_inserted_id``.
    """

    rows: "list[dict[str, Any]]" = field(default_factory=list)
    column_names: "list[str]" = field(default_factory=list)
    rows_affected: int = -1
    last_inserted_id: "Optional[Union[int, str]]" = None
    metadata: "dict[str, Any]" = field(default_factory=dict)

    def get_data(self) -> "list[dict[str, Any]]":
        return self.rows

    def get_first(self) -> "Optional[dict[str, Any]]":
        """Get the first row, or None when the result is empty."""
        return self.rows[0] if self.rows else None

    def get_count(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def __iter__(self) -> "Iterator[dict[str, Any]]":
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)
