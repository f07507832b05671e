"""General utility functions."""

import re

# Anything that is not a letter, digit or underscore
_PARAMETER_NAME_INVALID_CHARS_RE = re.compile(r"\W")

__all__ = ("sanitize_parameter_name",)


def sanitize_parameter_name(name: str) -> str:
    """Strip every non-word character from a parameter name.

    Distinct names can collapse onto the same sanitized name
    (``"a.b"`` and ``"ab"``); callers are expected to avoid that.

    Args:
        name: The raw parameter name.

    Returns:
        str: The name with only letters, digits and underscores left.
    """
    return _PARAMETER_NAME_INVALID_CHARS_RE.sub("", name)
