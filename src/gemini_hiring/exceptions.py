"""Error taxonomy for the structured-generation pipeline.

Every failure a caller can observe is one of a fixed set of kinds. Callers
branch on ``error.kind`` (or the class) and consult ``error.retryable``
instead of parsing message strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Exhaustive set of pipeline failure kinds."""

    INPUT_VALIDATION = "InputValidationError"
    TEMPLATE_RENDER = "TemplateRenderError"
    PROVIDER_TRANSPORT = "ProviderTransportError"
    PROVIDER_AUTH = "ProviderAuthError"
    PROVIDER_RATE_LIMIT = "ProviderRateLimitError"
    OUTPUT_VALIDATION = "OutputValidationError"


class GeminiHiringError(Exception):
    """Base exception for every classified pipeline failure.

    Attributes:
        kind: The taxonomy kind of this error.
        retryable: Whether a caller may reasonably retry the same request.
        context: Free-form diagnostic details (operation, model, issues).
    """

    kind: ErrorKind
    retryable: bool = False

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context

    def to_dict(self) -> dict[str, Any]:
        """Structured form for operator logs."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
            **self.context,
        }


class InputValidationError(GeminiHiringError):
    """Raised when caller-supplied input fails its operation's schema."""

    kind = ErrorKind.INPUT_VALIDATION

    def __init__(
        self, message: str, issues: list[dict[str, Any]] | None = None, **context: Any
    ) -> None:
        super().__init__(message, **context)
        self.issues: list[dict[str, Any]] = issues or []


class UnknownOperationError(InputValidationError):
    """Raised when an operation name is not registered"""

    def __init__(self, name: str, known: tuple[str, ...] = ()) -> None:
        super().__init__(
            f"Unknown operation '{name}'. Known operations: {', '.join(known)}",
            issues=[{"loc": ["operation"], "msg": "unknown operation", "input": name}],
        )
        self.name = name


class TemplateRenderError(GeminiHiringError):
    """Raised when a descriptor's template and its input disagree.

    This is a programming error, never a user-facing one.
    """

    kind = ErrorKind.TEMPLATE_RENDER


class ProviderTransportError(GeminiHiringError):
    """Raised for network failures, timeouts and provider-side 5xx responses."""

    kind = ErrorKind.PROVIDER_TRANSPORT
    retryable = True

    def __init__(self, message: str, *, retryable: bool = True, **context: Any) -> None:
        super().__init__(message, **context)
        self.retryable = retryable


class ProviderAuthError(GeminiHiringError):
    """Raised when provider credentials are missing or rejected"""

    kind = ErrorKind.PROVIDER_AUTH


class ProviderRateLimitError(GeminiHiringError):
    """Raised when the provider throttles the request."""

    kind = ErrorKind.PROVIDER_RATE_LIMIT
    retryable = True

    def __init__(
        self,
        message: str = "Provider rate limit exceeded",
        *,
        retry_after: float | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, retry_after=retry_after, **context)
        self.retry_after = retry_after


class OutputValidationError(GeminiHiringError):
    """Raised when a model response fails its schema even after coercion.

    ``issues`` holds the problems found on the first validation attempt;
    ``final_issues`` holds what was still wrong after the coercion pass.
    """

    kind = ErrorKind.OUTPUT_VALIDATION
    retryable = True

    def __init__(
        self,
        message: str,
        issues: list[dict[str, Any]] | None = None,
        final_issues: list[dict[str, Any]] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, **context)
        self.issues: list[dict[str, Any]] = issues or []
        self.final_issues: list[dict[str, Any]] = final_issues or []

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["issues"] = self.issues
        data["final_issues"] = self.final_issues
        return data


class OutputTruncatedError(OutputValidationError):
    """Raised when the response was cut off at the output token limit.

    Truncation is deterministic for a given prompt, so retrying as-is will
    not help.
    """

    retryable = False

    def __init__(
        self,
        max_output_tokens: int,
        output_tokens: int,
        issues: list[dict[str, Any]] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(
            f"Response truncated: {output_tokens}/{max_output_tokens} output tokens",
            issues=[
                {
                    "loc": [],
                    "msg": "response truncated at output token limit",
                    "type": "truncated",
                },
                *(issues or []),
            ],
            **context,
        )
        self.max_output_tokens = max_output_tokens
        self.output_tokens = output_tokens
