from typing import Any, Optional

__all__ = (
    "ConfigurationError",
    "QueryError",
    "SQLBuilderError",
    "SQLSnipError",
)


class SQLSnipError(Exception):
    """Base exception class from which all sqlsnip exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLSnipError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ConfigurationError(SQLSnipError):
    """A statement or adapter is missing something it needs to run.

    Raised when a statement is prepared without a bound adapter.
    """

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "No database adapter is bound to this statement."
        super().__init__(message)


class SQLBuilderError(SQLSnipError):
    """Issues building or generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class QueryError(SQLSnipError):
    """Errors raised by the database while preparing or executing a statement."""

    sql: Optional[str]

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Issues executing SQL statement."
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql

