"""Runtime-checkable protocols describing what a database adapter provides.

A :class:`~sqlsnip.statement.Statement` never talks to a database itself. It
asks its adapter to escape identifiers, format parameter labels, render the
filter, sort and pagination clauses, and finally to compile the generated SQL
into a prepared statement that can be executed repeatedly.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlsnip.result import ResultSet

__all__ = (
    "AdapterProtocol",
    "PreparedStatementProtocol",
)


@runtime_checkable
class PreparedStatementProtocol(Protocol):
    """A compiled statement handle returned by :meth:`AdapterProtocol.get_statement`."""

    sql: str

    def execute(self, parameters: "Mapping[str, Any]") -> "ResultSet":
        """Run the statement with parameter values keyed by adapter label."""
        ...


@runtime_checkable
class AdapterProtocol(Protocol):
    """Dialect-specific rendering plus statement preparation."""

    def escape_col_name(self, name: str) -> str:
        """Quote a (possibly table-qualified) column name."""
        ...

    def make_parameter_label(self, name: str) -> str:
        """Turn a sanitized parameter name into its placeholder label."""
        ...

    def generate_where(self, clauses: "Sequence[str]", prepend: str) -> str:
        """Render the filter clause, or an empty string when there are no clauses."""
        ...

    def generate_sort(self, sort: "Mapping[str, str]", prepend: "Optional[str]" = None) -> str:
        """Render the sort clause, or an empty string when nothing is sorted."""
        ...

    def generate_pagination(self, page_size: int, page_number: int) -> str:
        """Render the limit/offset clause, or an empty string when paging is off."""
        ...

    def get_statement(self, sql: str) -> "PreparedStatementProtocol":
        """Compile ``sql`` into a reusable prepared statement."""
        ...
