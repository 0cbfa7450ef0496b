"""Neutralize user-supplied text before it is placed inside a prompt."""

from __future__ import annotations

import re
from typing import Any

# C0 controls except tab, LF and CR, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def strip_control_chars(text: str) -> str:
    return _CONTROL_CHARS.sub("", text)


def sanitize_text(text: str) -> str:
    """Strip control characters and entity-encode angle brackets.

    User text is wrapped in ``<tag>...</tag>`` delimiters in every template;
    encoding ``<`` and ``>`` means it can never open or close one.
    """
    return strip_control_chars(text).replace("<", "&lt;").replace(">", "&gt;")


def finalize_value(value: Any) -> Any:
    """Jinja ``finalize`` hook applied to every rendered expression.

    ``None`` renders as an empty string; strings are sanitized; everything
    else is passed through for Jinja to stringify.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return sanitize_text(value)
    return value
