"""Shared enums and type aliases for sqlsnip."""

from collections import OrderedDict
from enum import Enum, IntEnum
from typing import Any

from typing_extensions import TypeAlias

__all__ = (
    "JoinKind",
    "SortDirection",
    "SortFields",
    "StatementParameters",
    "StatementType",
)

StatementParameters: TypeAlias = dict[str, Any]
"""Parameter values keyed by name (or by adapter label once formatted)."""
SortDirection: TypeAlias = str
SortFields: TypeAlias = OrderedDict[str, SortDirection]


class StatementType(IntEnum):
    """Statement shapes understood by the assembler.

    The integer values are stable so serialized configurations keep working.
    """

    SELECT = 1
    INSERT = 2
    UPDATE = 3
    DELETE = 4

    def __str__(self) -> str:
        return self.name


class JoinKind(str, Enum):
    """How a table is joined onto the base table."""

    JOIN = "JOIN"
    LEFT = "LEFT JOIN"
    RIGHT = "RIGHT JOIN"
    INNER = "INNER JOIN"
    OUTER = "OUTER JOIN"

    @property
    def keyword(self) -> str:
        """The SQL keyword(s) for this join."""
        return self.value

    def __str__(self) -> str:
        return self.value
