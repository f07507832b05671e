"""The statement assembler.

A :class:`Statement` combines a template with structured descriptions of the
tables, columns, filters, sort order and page that a query works on. It can
produce a whole query from one of the default templates, or fill the tokens of
a template supplied by the caller and leave the rest of its text untouched.

Example::

    from sqlsnip import Statement

    statement = (
        Statement()
        .select()
        .add_table("schema.users", "u")
        .left_join("schema.orders", "o", "u.id = o.user_id")
        .add_column("u.name", "name")
        .add_where("u.active = :active", {"active": True})
        .add_sort("name")
        .set_page_size(50)
        .set_page_number(2)
    )
    statement.generate_query()

Generated SQL is compiled once by the adapter and reused until something that
changes the SQL text is modified. Changing parameter values never forces a new
compilation.
"""

import copy
from collections import OrderedDict
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Optional, Union

from mypy_extensions import mypyc_attr

from sqlsnip.adapters.generic import DEFAULT_WHERE_PREPEND, GenericAdapter
from sqlsnip.components import ColumnSpec, TableSpec
from sqlsnip.exceptions import ConfigurationError, SQLBuilderError
from sqlsnip.template import COLUMNS, DEFAULT_TEMPLATES, PAGINATION, SORT, TABLES, WHERE, find_token, replace_token
from sqlsnip.typing import JoinKind, SortFields, StatementParameters, StatementType
from sqlsnip.utils.logging import get_logger
from sqlsnip.utils.text import sanitize_parameter_name

if TYPE_CHECKING:
    from sqlsnip.protocols import AdapterProtocol, PreparedStatementProtocol
    from sqlsnip.result import ResultSet

__all__ = ("Statement",)

logger = get_logger("statement")

_UNBOUND_ADAPTER = GenericAdapter()


def _token(name: str) -> str:
    return f"{{{{{name}}}}}"


def _resolve_join_kind(kind: "Union[JoinKind, str]") -> JoinKind:
    """Accept a ``JoinKind``, its SQL keyword (``"LEFT JOIN"``) or its name (``"LEFT"``)."""
    if isinstance(kind, JoinKind):
        return kind
    try:
        return JoinKind(kind)
    except ValueError:
        pass
    try:
        return JoinKind[str(kind).strip().upper()]
    except KeyError as e:
        msg = f"Unknown join kind {kind!r}."
        raise SQLBuilderError(msg) from e


@mypyc_attr(allow_interpreted_subclasses=True)
class Statement:
    """A SQL statement built from a template and structured components.

    Every mutator returns the statement so calls can be chained.
    """

    __slots__ = (
        "_adapter",
        "_columns",
        "_page_number",
        "_page_size",
        "_parameters",
        "_prepared",
        "_prepared_version",
        "_sort_fields",
        "_statement_type",
        "_tables",
        "_template",
        "_version",
        "_where_clauses",
    )

    def __init__(self, adapter: "Optional[AdapterProtocol]" = None) -> None:
        """Create an empty statement.

        Args:
            adapter: The adapter used to render dialect-specific SQL and run the
                statement. Without one, SQL is rendered generically and the
                statement cannot be prepared.
        """
        self._adapter = adapter
        self._statement_type: Optional[StatementType] = None
        self._template: Optional[str] = None
        self._parameters: StatementParameters = {}
        self._tables: OrderedDict[str, TableSpec] = OrderedDict()
        self._columns: OrderedDict[str, ColumnSpec] = OrderedDict()
        self._where_clauses: list[str] = []
        self._sort_fields: SortFields = OrderedDict()
        self._page_size = 0
        self._page_number = 0
        self._version = 0
        self._prepared: Optional[PreparedStatementProtocol] = None
        self._prepared_version = -1

    @classmethod
    def build(cls, adapter: "Optional[AdapterProtocol]" = None) -> "Statement":
        """Create a statement, so creation and configuration read as one expression."""
        return cls(adapter)

    @classmethod
    def check(cls, statement: "Optional[Statement]", adapter: "Optional[AdapterProtocol]" = None) -> "Statement":
        """Return ``statement``, or a new one when it is None, bound to ``adapter`` if given."""
        if not isinstance(statement, Statement):
            statement = cls()
        if adapter is not None:
            statement.set_adapter(adapter)
        return statement

    # -- cache --------------------------------------------------------------

    def _invalidate(self) -> None:
        """Record a change to the SQL text. Any prepared statement is now stale."""
        self._version += 1
        self._prepared = None

    @property
    def version(self) -> int:
        """Counter bumped by every change that alters the generated SQL."""
        return self._version

    @property
    def is_prepared(self) -> bool:
        return self._prepared is not None and self._prepared_version == self._version

    # -- adapter ------------------------------------------------------------

    @property
    def adapter(self) -> "AdapterProtocol":
        """The bound adapter, or the generic renderer when none is bound."""
        return self._adapter if self._adapter is not None else _UNBOUND_ADAPTER

    @property
    def has_adapter(self) -> bool:
        return self._adapter is not None

    def set_adapter(self, adapter: "AdapterProtocol") -> "Statement":
        """Bind the adapter this statement renders and runs with.

        Rebinding the same adapter keeps an existing prepared statement, so a
        statement can be reused even if this is called again with the same value.
        """
        if adapter is not self._adapter:
            self._invalidate()
            self._adapter = adapter
        return self

    # -- type and template --------------------------------------------------

    @property
    def statement_type(self) -> "Optional[StatementType]":
        return self._statement_type

    def set_type(self, kind: "Union[StatementType, int]", template: "Optional[str]" = None) -> "Statement":
        """Set the statement type and its template.

        Args:
            kind: A :class:`StatementType` or its integer value.
            template: A replacement template. Defaults to the type's canned template.

        Raises:
            SQLBuilderError: If ``kind`` is not a known statement type.

        Returns:
            Statement: This statement.
        """
        try:
            statement_type = StatementType(kind)
        except ValueError as e:
            msg = f"Unknown statement type {kind!r}."
            raise SQLBuilderError(msg) from e
        if statement_type is not self._statement_type:
            self._invalidate()
            self._statement_type = statement_type
        return self.set_template(template if template is not None else DEFAULT_TEMPLATES[statement_type])

    def select(self, template: "Optional[str]" = None) -> "Statement":
        return self.set_type(StatementType.SELECT, template)

    def insert(self, template: "Optional[str]" = None) -> "Statement":
        return self.set_type(StatementType.INSERT, template)

    def update(self, template: "Optional[str]" = None) -> "Statement":
        return self.set_type(StatementType.UPDATE, template)

    def delete(self, template: "Optional[str]" = None) -> "Statement":
        return self.set_type(StatementType.DELETE, template)

    def set_template(self, template: str) -> "Statement":
        """Replace the template. The statement type is left as it is."""
        if template != self._template:
            self._invalidate()
            self._template = template
        return self

    @property
    def template(self) -> "Optional[str]":
        return self._template

    def get_template(self) -> "Optional[str]":
        return self._template

    # -- tables -------------------------------------------------------------

    @property
    def tables(self) -> "list[TableSpec]":
        return list(self._tables.values())

    def add_table(self, name: str, alias: "Optional[str]" = None) -> "Statement":
        """Add a base table.

        Args:
            name: The table name, including schema if needed.
            alias: The name the rest of the query refers to the table by.

        Returns:
            Statement: This statement.
        """
        return self._put_table(TableSpec(name, alias))

    def add_join(
        self,
        kind: "Union[JoinKind, str]",
        name: str,
        alias: "Optional[str]" = None,
        condition: "Optional[str]" = None,
    ) -> "Statement":
        """Add a joined table.

        Args:
            kind: How the table is joined.
            name: The table name.
            alias: The alias of the table.
            condition: Raw join predicate, used verbatim.

        Raises:
            SQLBuilderError: If ``kind`` names no known join.

        Returns:
            Statement: This statement.
        """
        return self._put_table(TableSpec(name, alias, _resolve_join_kind(kind), condition))

    def join(self, name: str, alias: "Optional[str]" = None, condition: "Optional[str]" = None) -> "Statement":
        return self.add_join(JoinKind.JOIN, name, alias, condition)

    def left_join(self, name: str, alias: "Optional[str]" = None, condition: "Optional[str]" = None) -> "Statement":
        return self.add_join(JoinKind.LEFT, name, alias, condition)

    def right_join(self, name: str, alias: "Optional[str]" = None, condition: "Optional[str]" = None) -> "Statement":
        return self.add_join(JoinKind.RIGHT, name, alias, condition)

    def inner_join(self, name: str, alias: "Optional[str]" = None, condition: "Optional[str]" = None) -> "Statement":
        return self.add_join(JoinKind.INNER, name, alias, condition)

    def outer_join(self, name: str, alias: "Optional[str]" = None, condition: "Optional[str]" = None) -> "Statement":
        return self.add_join(JoinKind.OUTER, name, alias, condition)

    def _put_table(self, table: TableSpec) -> "Statement":
        self._invalidate()
        self._tables[table.key] = table
        return self

    def generate_tables(self) -> str:
        """Generate the tables portion of the query."""
        return _join_snippets(
            table.generate_snippet(self._statement_type, self.adapter) for table in self._tables.values()
        )

    # -- columns ------------------------------------------------------------

    @property
    def columns(self) -> "list[ColumnSpec]":
        return list(self._columns.values())

    def add_column(
        self,
        name: str,
        alias: "Optional[str]" = None,
        value: Any = None,
        param_name: "Optional[str]" = None,
    ) -> "Statement":
        """Add a column, optionally with the value it receives on INSERT or UPDATE.

        Args:
            name: The column name, including the table name if several tables are used.
            alias: The alias of the column.
            value: The value bound to the column's parameter.
            param_name: The parameter name. Defaults to the alias or name, sanitized.

        Returns:
            Statement: This statement.
        """
        self._invalidate()
        key = alias if alias is not None else name
        sanitized = sanitize_parameter_name(param_name if param_name is not None else key)
        self._columns[key] = ColumnSpec(name, key, sanitized)
        self._parameters[sanitized] = value
        return self

    def generate_columns(self) -> str:
        """Generate the column list, or assignments, for the current statement type."""
        return _join_snippets(
            column.generate_snippet(self._statement_type, self.adapter) for column in self._columns.values()
        )

    # -- filters ------------------------------------------------------------

    @property
    def where_clauses(self) -> "list[str]":
        return list(self._where_clauses)

    def add_where(self, clause: str, params: "Optional[Mapping[str, Any]]" = None) -> "Statement":
        """Add a raw filter clause and the parameters it refers to.

        Parameter names are stored exactly as given. Names that
        :meth:`set_parameter` would sanitize differently are logged, because
        they cannot be read back or removed through the sanitizing accessors.

        Args:
            clause: The filter clause, e.g. ``"age > :min_age"``.
            params: Parameter values used by the clause.

        Returns:
            Statement: This statement.
        """
        self._invalidate()
        self._where_clauses.append(clause)
        for key, value in (params or {}).items():
            if sanitize_parameter_name(key) != key:
                logger.warning(
                    "Filter parameter %r is stored unsanitized; get_parameter and remove_parameter will not find it",
                    key,
                )
            self._parameters[key] = value
        return self

    def generate_where(self, prepend: "Optional[str]" = None) -> str:
        """Generate the filter clause.

        Args:
            prepend: Keyword such as ``WHERE`` or ``AND`` placed before the
                clauses. Defaults to ``WHERE``.

        Returns:
            str: The SQL snippet, empty when no clauses were added.
        """
        if prepend is None:
            prepend = DEFAULT_WHERE_PREPEND
        return self.adapter.generate_where(list(self._where_clauses), prepend)

    # -- parameters ---------------------------------------------------------

    def set_parameter(self, name: str, value: Any) -> "Statement":
        """Add a parameter or change its value. Does not affect a prepared statement."""
        self._parameters[sanitize_parameter_name(name)] = value
        return self

    def get_parameter(self, name: str) -> Any:
        """Get the value of a parameter, or None if it is not set."""
        return self._parameters.get(sanitize_parameter_name(name))

    def remove_parameter(self, name: str) -> "Statement":
        self._parameters.pop(sanitize_parameter_name(name), None)
        return self

    def get_parameters(self) -> StatementParameters:
        """Get all parameter values keyed by the adapter's parameter labels."""
        adapter = self.adapter
        return {adapter.make_parameter_label(name): value for name, value in self._parameters.items()}

    # -- pagination ---------------------------------------------------------

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page_number(self) -> int:
        return self._page_number

    def set_page_size(self, page_size: int) -> "Statement":
        """Set the number of records per page. 0 turns paging off."""
        if page_size < 0:
            msg = f"Page size must be zero or greater, got {page_size}."
            raise SQLBuilderError(msg)
        self._invalidate()
        self._page_size = page_size
        return self

    def set_page_number(self, page_number: int) -> "Statement":
        if page_number < 0:
            msg = f"Page number must be zero or greater, got {page_number}."
            raise SQLBuilderError(msg)
        self._invalidate()
        self._page_number = page_number
        return self

    def generate_pagination(self) -> str:
        """Generate the snippet limiting the records returned to the current page."""
        return self.adapter.generate_pagination(self._page_size, self._page_number)

    # -- sorting ------------------------------------------------------------

    @property
    def sort_fields(self) -> "dict[str, str]":
        return dict(self._sort_fields)

    def add_sort(self, field: str, direction: str = "ASC") -> "Statement":
        """Sort on ``field``. Sorting on a field again changes its direction in place."""
        self._invalidate()
        self._sort_fields[field] = direction
        return self

    def generate_sort(self, prepend: "Optional[str]" = None) -> str:
        """Generate the sort clause.

        Args:
            prepend: Text placed before the sort list. The adapter's default
                (``ORDER BY``) is used when None.

        Returns:
            str: The SQL snippet, empty when nothing is sorted.
        """
        return self.adapter.generate_sort(OrderedDict(self._sort_fields), prepend)

    # -- assembly -----------------------------------------------------------

    def generate_query(self) -> str:
        """Fill the template's tokens with generated snippets.

        Tokens are substituted in the order columns, pagination, tables, where,
        sort. Only the first ``{{where}}`` and ``{{sort}}`` token is filled;
        unknown tokens are left as they are.

        Returns:
            str: The query string.
        """
        query = self._template or ""
        query = query.replace(_token(COLUMNS), self.generate_columns())
        query = query.replace(_token(PAGINATION), self.generate_pagination())
        query = query.replace(_token(TABLES), self.generate_tables())
        where = find_token(query, WHERE)
        if where is not None:
            query = replace_token(query, where, self.generate_where(where.argument))
        sort = find_token(query, SORT)
        if sort is not None:
            query = replace_token(query, sort, self.generate_sort(sort.argument))
        return query

    def prepare(self) -> "Statement":
        """Have the adapter compile the generated query.

        Calling this again without changing the statement reuses the compiled
        statement.

        Raises:
            ConfigurationError: If no adapter is bound.

        Returns:
            Statement: This statement.
        """
        if self._adapter is None:
            msg = "No database adapter set for statement."
            raise ConfigurationError(msg)
        if self.is_prepared:
            return self
        sql = self.generate_query()
        logger.debug("Preparing statement (version %d): %s", self._version, sql)
        self._prepared = self._adapter.get_statement(sql)
        self._prepared_version = self._version
        return self

    def execute(self) -> "ResultSet":
        """Execute the statement with the current parameter values.

        Errors raised by the adapter are not caught.

        Returns:
            ResultSet: The result set produced by the adapter.
        """
        if not self.is_prepared:
            self.prepare()
        prepared = self._prepared
        if prepared is None:  # pragma: no cover
            msg = "Statement was not prepared."
            raise ConfigurationError(msg)
        logger.debug("Executing statement: %s", prepared.sql)
        return prepared.execute(self.get_parameters())

    # -- copying ------------------------------------------------------------

    def copy(self) -> "Statement":
        """Return an independent, unprepared copy sharing only the adapter."""
        new = type(self).__new__(type(self))
        new._adapter = self._adapter
        new._statement_type = self._statement_type
        new._template = self._template
        new._parameters = dict(self._parameters)
        new._tables = OrderedDict((key, copy.copy(table)) for key, table in self._tables.items())
        new._columns = OrderedDict((key, copy.copy(column)) for key, column in self._columns.items())
        new._where_clauses = list(self._where_clauses)
        new._sort_fields = OrderedDict(self._sort_fields)
        new._page_size = self._page_size
        new._page_number = self._page_number
        new._version = 0
        new._prepared = None
        new._prepared_version = -1
        return new

    def __copy__(self) -> "Statement":
        return self.copy()

    def __deepcopy__(self, memo: "dict[int, Any]") -> "Statement":
        return self.copy()

    def __str__(self) -> str:
        return self.generate_query()

    def __repr__(self) -> str:
        return (
            f"Statement(type={self._statement_type!s}, template={self._template!r}, "
            f"tables={len(self._tables)}, columns={len(self._columns)}, adapter={self.adapter!r})"
        )


def _join_snippets(snippets: "Iterable[str]") -> str:
    return ", ".join(snippet for snippet in snippets if snippet)
