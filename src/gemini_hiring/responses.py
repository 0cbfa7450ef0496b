"""Map pipeline errors onto what an HTTP layer should return.

Provider and validation details stay in the logs. Callers get a generic
message, a status code and the retry hint.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from .exceptions import (
    GeminiHiringError,
    InputValidationError,
    ProviderRateLimitError,
)

log = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "AI generation failed. Please try again later."
INVALID_INPUT_MESSAGE = "Invalid request"


@dataclasses.dataclass(frozen=True, slots=True)
class ErrorResponse:
    status_code: int
    body: dict[str, Any]


def to_error_response(error: BaseException) -> ErrorResponse:
    """Collapse any failure into a caller-safe response.

    Input validation becomes a 400 with field-level issues; everything else,
    including unclassified exceptions, becomes a 500 with a generic message.
    """
    if isinstance(error, InputValidationError):
        return ErrorResponse(
            status_code=400,
            body={"error": INVALID_INPUT_MESSAGE, "issues": error.issues},
        )

    if not isinstance(error, GeminiHiringError):
        log.error("Unclassified pipeline failure: %r", error)
        return ErrorResponse(
            status_code=500, body={"error": GENERIC_FAILURE_MESSAGE, "retryable": False}
        )

    body: dict[str, Any] = {
        "error": GENERIC_FAILURE_MESSAGE,
        "retryable": error.retryable,
    }
    if isinstance(error, ProviderRateLimitError) and error.retry_after is not None:
        body["retry_after"] = error.retry_after
    return ErrorResponse(status_code=500, body=body)
