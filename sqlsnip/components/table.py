from typing import TYPE_CHECKING, Any, Optional

from sqlsnip.typing import JoinKind, StatementType

if TYPE_CHECKING:
    from sqlsnip.protocols import AdapterProtocol

__all__ = ("TableSpec",)


class TableSpec:
    """A single table in a statement, plus how it is joined.

    A table without a join kind is a base table. Joined tables only make
    sense for SELECT statements, so INSERT and UPDATE render base tables
    alone and DELETE renders nothing (its template names the table itself).
    """

    __slots__ = ("alias", "condition", "join", "name")

    def __init__(
        self,
        name: str,
        alias: "Optional[str]" = None,
        join: "Optional[JoinKind]" = None,
        condition: "Optional[str]" = None,
    ) -> None:
        """Initialize a table description.

        Args:
            name: The table name, optionally schema qualified.
            alias: The name the rest of the query refers to the table by.
            join: How the table is joined. None for a base table.
            condition: Raw join predicate, inserted as given.
        """
        self.name = name
        self.alias = alias
        self.join = JoinKind(join) if join is not None else None
        self.condition = condition

    @property
    def key(self) -> str:
        """Key the table is registered under in a statement."""
        return self.alias if self.alias is not None else self.name

    @property
    def is_base_table(self) -> bool:
        return self.join is None

    def generate_snippet(self, statement_type: "Optional[StatementType]", adapter: "AdapterProtocol") -> str:
        """Get the SQL snippet for this table.

        Args:
            statement_type: The type of statement being generated.
            adapter: The adapter the snippet is generated for.

        Returns:
            str: The snippet, or an empty string when the table has no place in
            this kind of statement.
        """
        if statement_type == StatementType.SELECT:
            return self._select_snippet()
        if statement_type in {StatementType.INSERT, StatementType.UPDATE}:
            return self._insert_update_snippet()
        return ""

    def _select_snippet(self) -> str:
        snippet = self.name
        if self.alias is not None:
            snippet += f" {self.alias}"
        if self.condition is not None:
            snippet += f" ON {self.condition}"
        return snippet

    def _insert_update_snippet(self) -> str:
        return self.name if self.is_base_table else ""

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TableSpec):
            return NotImplemented
        return (self.name, self.alias, self.join, self.condition) == (
            other.name,
            other.alias,
            other.join,
            other.condition,
        )

    def __hash__(self) -> int:
        return hash((self.name, self.alias, self.join, self.condition))

    def __repr__(self) -> str:
        return f"TableSpec(name={self.name!r}, alias={self.alias!r}, join={self.join!r}, condition={self.condition!r})"
