"""sqlsnip: fill SQL templates with generated snippets."""

from sqlsnip import adapters, components, exceptions, template, typing, utils
from sqlsnip.__metadata__ import __version__
from sqlsnip.adapters import DialectAdapter, GenericAdapter
from sqlsnip.components import ColumnSpec, TableSpec
from sqlsnip.exceptions import ConfigurationError, QueryError, SQLBuilderError, SQLSnipError
from sqlsnip.protocols import AdapterProtocol, PreparedStatementProtocol
from sqlsnip.result import ResultSet
from sqlsnip.statement import Statement
from sqlsnip.typing import JoinKind, StatementType

__all__ = (
    "AdapterProtocol",
    "ColumnSpec",
    "ConfigurationError",
    "DialectAdapter",
    "GenericAdapter",
    "JoinKind",
    "PreparedStatementProtocol",
    "QueryError",
    "ResultSet",
    "SQLBuilderError",
    "SQLSnipError",
    "Statement",
    "StatementType",
    "TableSpec",
    "__version__",
    "adapters",
    "components",
    "exceptions",
    "template",
    "typing",
    "utils",
)
