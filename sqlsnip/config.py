from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from sqlsnip.protocols import AdapterProtocol


__all__ = (
    "AdapterT",
    "ConnectionT",
    "DatabaseConfigProtocol",
    "NoPoolSyncConfig",
)

ConnectionT = TypeVar("ConnectionT")
AdapterT = TypeVar("AdapterT", bound="AdapterProtocol")


class DatabaseConfigProtocol(ABC, Generic[ConnectionT, AdapterT]):
    """Protocol defining the interface for database configurations."""

    __slots__ = ("connection_config",)
    adapter_type: "ClassVar[type[Any]]"
    connection_type: "ClassVar[type[Any]]"

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.connection_config == other.connection_config

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Create and return a new database connection."""
        raise NotImplementedError

    @abstractmethod
    def provide_connection(self, *args: Any, **kwargs: Any) -> "AbstractContextManager[ConnectionT]":
        """Provide a database connection context manager."""
        raise NotImplementedError

    @abstractmethod
    def provide_adapter(self, *args: Any, **kwargs: Any) -> "AbstractContextManager[AdapterT]":
        """Provide an adapter bound to a connection, ready to hand to a statement."""
        raise NotImplementedError


class NoPoolSyncConfig(DatabaseConfigProtocol[ConnectionT, AdapterT]):
    """Base class for sync database configurations that do not implement a pool."""

    __slots__ = ()

    def __init__(self, *, connection_config: "Optional[dict[str, Any]]" = None) -> None:
        self.connection_config: dict[str, Any] = dict(connection_config) if connection_config else {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(connection_config={self.connection_config!r})"
