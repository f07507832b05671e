"""Table and column descriptions that render themselves per statement type."""

from sqlsnip.components.column import ColumnSpec
from sqlsnip.components.table import TableSpec

__all__ = ("ColumnSpec", "TableSpec")
