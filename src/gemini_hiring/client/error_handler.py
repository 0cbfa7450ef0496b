"""
Translate Gemini SDK and transport failures into the pipeline's error taxonomy
"""

from __future__ import annotations

import re
from typing import Any

from google.genai import errors as genai_errors
import httpx

from gemini_hiring.exceptions import (
    GeminiHiringError,
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderTransportError,
)

_RETRY_DELAY = re.compile(r"^\s*(\d+(?:\.\d+)?)s\s*$")


class ProviderErrorTranslator:
    """Maps provider exceptions onto taxonomy errors.

    Messages stay generic; the provider's own wording and payloads are kept
    out of the resulting error so nothing provider-specific reaches callers.
    """

    def translate(
        self, error: BaseException, *, model: str, timeout_seconds: float
    ) -> GeminiHiringError:
        """Return the taxonomy error for ``error``.

        Cancellation is never translated; callers re-raise it untouched.
        """
        if isinstance(error, GeminiHiringError):
            return error

        if isinstance(error, genai_errors.APIError):
            return self._from_api_error(error, model=model)

        if isinstance(error, TimeoutError | httpx.TimeoutException):
            return ProviderTransportError(
                f"Model call timed out after {timeout_seconds:g}s",
                model=model,
                reason="timeout",
            )

        if isinstance(error, httpx.TransportError | OSError):
            return ProviderTransportError(
                "Network error while calling the model provider",
                model=model,
                reason="network",
            )

        return ProviderTransportError(
            f"Unexpected provider failure ({type(error).__name__})",
            model=model,
            reason="unexpected",
        )

    def _from_api_error(
        self, error: genai_errors.APIError, *, model: str
    ) -> GeminiHiringError:
        status = getattr(error, "code", None)

        if status == 429:
            return ProviderRateLimitError(
                retry_after=self.retry_after(error), model=model, status=status
            )
        if status in (401, 403):
            return ProviderAuthError(
                "Model provider rejected the credentials", model=model, status=status
            )
        if isinstance(status, int) and 400 <= status < 500:
            return ProviderTransportError(
                f"Model provider rejected the request (HTTP {status})",
                retryable=False,
                model=model,
                status=status,
            )
        return ProviderTransportError(
            f"Model provider error (HTTP {status})" if status else "Model provider error",
            model=model,
            status=status,
        )

    def retry_after(self, error: genai_errors.APIError) -> float | None:
        """Best-effort delay hint from ``Retry-After`` or a ``RetryInfo`` detail."""
        response = getattr(error, "response", None)
        headers = getattr(response, "headers", None)
        if headers is not None:
            header = headers.get("retry-after")
            if header is not None:
                try:
                    return float(header)
                except ValueError:
                    pass

        details: Any = getattr(error, "details", None)
        if isinstance(details, dict):
            inner = details.get("error", details)
            details = inner.get("details") if isinstance(inner, dict) else None
        if not isinstance(details, list):
            return None
        for detail in details:
            if not isinstance(detail, dict):
                continue
            if not str(detail.get("@type", "")).endswith("RetryInfo"):
                continue
            match = _RETRY_DELAY.match(str(detail.get("retryDelay", "")))
            if match:
                return float(match.group(1))
        return None
