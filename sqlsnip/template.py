"""Template tokens and the scanner that finds them.

A template is plain SQL text with ``{{...}}`` placeholders. The recognised
tokens are ``{{columns}}``, ``{{tables}}``, ``{{pagination}}``, ``{{where}}``
and ``{{sort}}``. The last two take an optional argument after a pipe, e.g.
``{{where|AND}}`` or ``{{sort|,}}``, which replaces the keyword put in front
of the generated clause. Anything else between double braces is left alone.
"""

import re
from collections.abc import Iterator
from typing import NamedTuple, Optional

from sqlsnip.typing import StatementType

__all__ = (
    "COLUMNS",
    "DEFAULT_TEMPLATES",
    "PAGINATION",
    "SORT",
    "TABLES",
    "TOKEN_NAMES",
    "WHERE",
    "TemplateToken",
    "find_token",
    "replace_token",
    "scan_tokens",
)

COLUMNS = "columns"
TABLES = "tables"
PAGINATION = "pagination"
WHERE = "where"
SORT = "sort"
TOKEN_NAMES = frozenset((COLUMNS, TABLES, PAGINATION, WHERE, SORT))
_ARGUMENT_TOKENS = frozenset((WHERE, SORT))

DEFAULT_TEMPLATES: "dict[StatementType, str]" = {
    StatementType.SELECT: "SELECT {{columns}} FROM {{tables}} {{where}} {{sort}} {{pagination}}",
    StatementType.INSERT: "INSERT {{columns}} INTO {{tables}}",
    StatementType.UPDATE: "UPDATE {{table}} SET {{columns}} {{where}}",
    StatementType.DELETE: "DELETE FROM {{table}} {{where}}",
}

_TOKEN_RE = re.compile(r"\{\{(?P<name>[a-z]+)(?:\|(?P<argument>[A-Za-z .,\-]*))?\}\}")


class TemplateToken(NamedTuple):
    """One placeholder found in a template."""

    name: str
    argument: "Optional[str]"
    text: str
    start: int
    end: int


def scan_tokens(template: str) -> "Iterator[TemplateToken]":
    """Yield every recognised token in ``template`` from left to right.

    Only ``where`` and ``sort`` accept an argument; ``{{columns|x}}`` and
    unknown names such as ``{{table}}`` are not tokens.

    Args:
        template: Template text to scan.

    Yields:
        TemplateToken: The tokens in order of appearance.
    """
    for match in _TOKEN_RE.finditer(template):
        name = match.group("name")
        argument = match.group("argument")
        if name not in TOKEN_NAMES:
            continue
        if argument is not None and name not in _ARGUMENT_TOKENS:
            continue
        yield TemplateToken(name, argument, match.group(0), match.start(), match.end())


def find_token(template: str, name: str) -> "Optional[TemplateToken]":
    """Return the first token called ``name``, or None."""
    return next((token for token in scan_tokens(template) if token.name == name), None)


def replace_token(template: str, token: TemplateToken, snippet: str) -> str:
    """Substitute ``snippet`` for the single occurrence described by ``token``."""
    return f"{template[: token.start]}{snippet}{template[token.end :]}"
