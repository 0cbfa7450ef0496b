"""Turn pydantic validation errors into plain, loggable issue dicts."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

Issue = dict[str, Any]


def issues_from_error(error: ValidationError) -> list[Issue]:
    """One issue per failing field: ``loc`` (path list), ``msg`` and ``type``.

    Offending values are left out so issues can be logged without echoing
    user or model content.
    """
    return [
        {"loc": list(detail["loc"]), "msg": detail["msg"], "type": detail["type"]}
        for detail in error.errors(include_url=False)
    ]


def format_loc(loc: list[Any]) -> str:
    return ".".join(str(part) for part in loc) or "<root>"
