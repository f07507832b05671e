"""Dialect-aware rendering backed by sqlglot."""

import re
from typing import TYPE_CHECKING, Optional

from sqlglot import exp
from sqlglot.dialects.dialect import Dialect

from sqlsnip.adapters.generic import GenericAdapter, page_offset
from sqlsnip.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from sqlglot.dialects.dialect import DialectType

__all__ = ("DialectAdapter",)

SORT_DIRECTIONS = frozenset(("ASC", "DESC"))
_DOTTED_IDENTIFIER = re.compile(r"^\w+(?:\.\w+)*$")


class DialectAdapter(GenericAdapter):
    """Render identifiers, sorting and paging for a specific SQL dialect.

    Identifiers are quoted with the dialect's own quote characters, so
    ``schema.table.col`` becomes ``"schema"."table"."col"`` for PostgreSQL and
    SQLite, or ```schema`.`table`.`col``` for MySQL. Pagination uses
    ``LIMIT n OFFSET m``. Like :class:`GenericAdapter` this adapter has no
    connection; subclasses provide :meth:`get_statement`.
    """

    sort_separator = ", "

    def __init__(self, dialect: "DialectType" = None) -> None:
        """Initialize the adapter.

        Args:
            dialect: Any dialect name or instance sqlglot accepts, e.g. ``"postgres"``.
        """
        self.dialect = Dialect.get_or_raise(dialect)

    @property
    def dialect_name(self) -> str:
        return type(self.dialect).__name__.lower()

    def escape_col_name(self, name: str) -> str:
        """Quote a plain or dotted identifier.

        A wildcard (``*`` or ``t.*``) keeps its star unquoted. Anything else that is
        not an identifier, such as ``count(*)``, is returned unchanged.
        """
        if name == "*":
            return name
        if name.endswith(".*") and _DOTTED_IDENTIFIER.match(name[:-2]):
            return f"{self._quote(name[:-2])}.*"
        if not _DOTTED_IDENTIFIER.match(name):
            return name
        return self._quote(name)

    def _quote(self, name: str) -> str:
        return exp.to_column(name).sql(dialect=self.dialect, identify=True)

    def render_sort_field(self, field: str, direction: str) -> str:
        normalized = direction.strip().upper()
        if normalized not in SORT_DIRECTIONS:
            msg = f"Invalid sort direction {direction!r} for field {field!r}. Must be one of ASC or DESC."
            raise SQLBuilderError(msg)
        return f"{self.escape_col_name(field)} {normalized}"

    def generate_pagination(self, page_size: int, page_number: int) -> str:
        if page_size <= 0:
            return ""
        snippet = self._render(exp.Limit(expression=exp.Literal.number(page_size)))
        offset = page_offset(page_size, page_number)
        if offset:
            snippet = f"{snippet} {self._render(exp.Offset(expression=exp.Literal.number(offset)))}"
        return snippet

    def _render(self, expression: "exp.Expression") -> str:
        return expression.sql(dialect=self.dialect).strip()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect_name!r})"
