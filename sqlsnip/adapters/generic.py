"""Connectionless adapter used when a statement has no database bound."""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Optional

from sqlsnip.exceptions import ConfigurationError

if TYPE_CHECKING:
    from sqlsnip.protocols import PreparedStatementProtocol

__all__ = ("DEFAULT_SORT_PREPEND", "DEFAULT_WHERE_PREPEND", "GenericAdapter")

DEFAULT_WHERE_PREPEND = "WHERE"
DEFAULT_SORT_PREPEND = "ORDER BY "


class GenericAdapter:
    """A generic adapter that renders SQL but cannot run it.

    Identifiers are bracket quoted, parameters use the ``:name`` style and
    pagination uses the ``LIMIT offset, count`` form. This class also serves
    as the base class for the other adapters.
    """

    parameter_prefix = ":"
    where_separator = " AND "
    sort_separator = ","

    def escape_col_name(self, name: str) -> str:
        return f"[{name}]"

    def make_parameter_label(self, name: str) -> str:
        return f"{self.parameter_prefix}{name}"

    def strip_parameter_label(self, label: str) -> str:
        """Inverse of :meth:`make_parameter_label`."""
        if label.startswith(self.parameter_prefix):
            return label[len(self.parameter_prefix) :]
        return label

    def generate_where(self, clauses: "Sequence[str]", prepend: str = DEFAULT_WHERE_PREPEND) -> str:
        """Join the filter clauses with AND behind ``prepend``.

        Returns:
            str: The clause, or an empty string when there is nothing to filter on.
        """
        if not clauses:
            return ""
        return _join_prepended(prepend, self.where_separator.join(clauses))

    def generate_sort(self, sort: "Mapping[str, str]", prepend: "Optional[str]" = None) -> str:
        """Render ``field DIRECTION`` pairs in insertion order.

        Args:
            sort: Sort directions keyed by field.
            prepend: Text placed in front of the list. Defaults to ``ORDER BY``.

        Returns:
            str: The sort clause, or an empty string when nothing is sorted.
        """
        if not sort:
            return ""
        if prepend is None:
            prepend = DEFAULT_SORT_PREPEND
        body = self.sort_separator.join(self.render_sort_field(field, direction) for field, direction in sort.items())
        return _join_prepended(prepend, body)

    def render_sort_field(self, field: str, direction: str) -> str:
        return f"{field} {direction}"

    def generate_pagination(self, page_size: int, page_number: int) -> str:
        """Render ``LIMIT offset, count`` for one-based ``page_number``.

        Returns:
            str: The clause, or an empty string when ``page_size`` is not positive.
        """
        if page_size <= 0:
            return ""
        return f"LIMIT {page_offset(page_size, page_number)}, {page_size}"

    def get_statement(self, sql: str) -> "PreparedStatementProtocol":
        msg = f"{type(self).__name__} has no database connection and cannot prepare statements."
        raise ConfigurationError(msg)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def page_offset(page_size: int, page_number: int) -> int:
    """Number of rows skipped before ``page_number`` (pages start at 1)."""
    return max(page_number - 1, 0) * page_size


def _join_prepended(prepend: str, body: str) -> str:
    prepend = prepend.rstrip()
    return f"{prepend} {body}" if prepend else body
