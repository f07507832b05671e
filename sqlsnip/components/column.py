from typing import TYPE_CHECKING, Any, Optional

from sqlsnip.typing import StatementType

if TYPE_CHECKING:
    from sqlsnip.protocols import AdapterProtocol

__all__ = ("ColumnSpec",)


class ColumnSpec:
    """A single column in a statement.

    Attributes:
        name: The column name, typically qualified with its table.
        alias: The name the column is exposed as. Defaults to ``name``.
        param_name: The sanitized parameter bound to this column on INSERT and UPDATE.
    """

    __slots__ = ("alias", "name", "param_name")

    def __init__(self, name: str, alias: "Optional[str]", param_name: str) -> None:
        self.name = name
        self.alias = alias if alias is not None else name
        self.param_name = param_name

    def generate_snippet(self, statement_type: "Optional[StatementType]", adapter: "AdapterProtocol") -> str:
        """Render the column for a select list or a ``column = :param`` assignment.

        Returns:
            str: The snippet, empty for statement types that take no columns.
        """
        if statement_type == StatementType.SELECT:
            alias = f" AS {self.alias}" if self.alias and self.alias != self.name else ""
            return f"{adapter.escape_col_name(self.name)}{alias}"
        if statement_type in {StatementType.INSERT, StatementType.UPDATE}:
            return f"{adapter.escape_col_name(self.name)} = {adapter.make_parameter_label(self.param_name)}"
        return ""

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ColumnSpec):
            return NotImplemented
        return (self.name, self.alias, self.param_name) == (other.name, other.alias, other.param_name)

    def __hash__(self) -> int:
        return hash((self.name, self.alias, self.param_name))

    def __repr__(self) -> str:
        return f"ColumnSpec(name={self.name!r}, alias={self.alias!r}, param_name={self.param_name!r})"
