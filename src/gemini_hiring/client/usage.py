"""Read token usage and stop reason off a ``GenerateContentResponse``."""

from __future__ import annotations

from typing import Any

from gemini_hiring.constants import STOP_REASON_UNKNOWN


def _get_token_count(usage_obj: Any, attr_name: str) -> int:
    """Safely extract a token count; missing or malformed counts read as 0."""
    try:
        value = getattr(usage_obj, attr_name, 0)
        return int(value) if value is not None else 0
    except (ValueError, TypeError):
        return 0


def extract_token_usage(response: Any) -> tuple[int, int]:
    """Return ``(input_tokens, output_tokens)`` for a provider response."""
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return 0, 0
    return (
        _get_token_count(usage, "prompt_token_count"),
        _get_token_count(usage, "candidates_token_count"),
    )


def extract_stop_reason(response: Any) -> str:
    """Finish reason of the first candidate, e.g. ``STOP`` or ``MAX_TOKENS``."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return STOP_REASON_UNKNOWN
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return STOP_REASON_UNKNOWN
    return str(getattr(reason, "name", reason))


def extract_text(response: Any) -> str:
    try:
        text = response.text
    except (AttributeError, ValueError):
        return ""
    return text or ""
