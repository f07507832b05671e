"""Logger factory for sqlsnip.

Every module asks :func:`get_logger` for a logger under the ``sqlsnip``
namespace. Records carry the caller's correlation id, when one is set, so
statement logs can be tied back to the request that built them.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlsnip"

correlation_id_var: ContextVar[str | None] = ContextVar("sqlsnip_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag log records emitted in the current context with ``correlation_id``. ``None`` clears it."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class CorrelationIDFilter(logging.Filter):
    """Copies the current correlation id onto ``record.correlation_id``."""

    def filter(self, record: LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the ``sqlsnip`` namespace.

    Args:
        name: Dotted logger name. It is prefixed with ``sqlsnip.`` unless it
            already starts with it. ``None`` returns the package logger.

    Returns:
        The logger, with a single :class:`CorrelationIDFilter` attached.
    """
    if name is None:
        name = ROOT_LOGGER_NAME
    elif name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger
