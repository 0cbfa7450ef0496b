"""Async Gemini client used by the pipeline to make a single model call."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from google import genai
from google.genai import types

from gemini_hiring.exceptions import ProviderAuthError
from gemini_hiring.types import ModelCallConfig, ModelResponse, RenderedPrompt

from .error_handler import ProviderErrorTranslator
from .usage import extract_stop_reason, extract_text, extract_token_usage

if TYPE_CHECKING:
    from gemini_hiring.config import HiringSettings

log = logging.getLogger(__name__)


@runtime_checkable
class ModelClient(Protocol):
    """Anything that can turn a rendered prompt into a ``ModelResponse``.

    Implementations raise only taxonomy errors (or ``CancelledError``) and do
    not record call outcomes; the pipeline does that.
    """

    async def call(
        self, prompt: RenderedPrompt, config: ModelCallConfig
    ) -> ModelResponse: ...


class GeminiModelClient:
    """``ModelClient`` backed by the ``google-genai`` async API.

    The SDK client is created on first use, so a process without an API key
    starts normally and each call fails with ``ProviderAuthError``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        error_translator: ProviderErrorTranslator | None = None,
    ) -> None:
        self._api_key = api_key
        self._client: genai.Client | None = None
        self.error_translator = error_translator or ProviderErrorTranslator()

    @classmethod
    def from_settings(cls, settings: HiringSettings) -> GeminiModelClient:
        return cls(api_key=settings.api_key)

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            raise ProviderAuthError(
                "No API key configured for the model provider (set GEMINI_API_KEY)"
            )
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
            log.debug("Created google-genai client")
        return self._client

    async def call(self, prompt: RenderedPrompt, config: ModelCallConfig) -> ModelResponse:
        """Send one generate-content request.

        Args:
            prompt: Rendered system instruction and user text.
            config: Model, sampling and timeout settings for this call.

        Returns:
            The raw text with token usage, stop reason and latency.

        Raises:
            ProviderAuthError: Missing or rejected credentials.
            ProviderRateLimitError: The provider throttled the request.
            ProviderTransportError: Timeout, network failure or provider error.
            asyncio.CancelledError: Propagated unchanged.
        """
        client = self._get_client()
        generation_config = types.GenerateContentConfig(
            system_instruction=prompt.system,
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
            response_mime_type="application/json" if config.json_mode else None,
        )

        start = time.perf_counter()
        try:
            async with asyncio.timeout(config.timeout_seconds):
                response = await client.aio.models.generate_content(
                    model=config.model,
                    contents=prompt.text,
                    config=generation_config,
                )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise self.error_translator.translate(
                e, model=config.model, timeout_seconds=config.timeout_seconds
            ) from e
        latency_ms = int((time.perf_counter() - start) * 1000)

        input_tokens, output_tokens = extract_token_usage(response)
        return ModelResponse(
            raw_text=extract_text(response),
            model=config.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            stop_reason=extract_stop_reason(response),
            latency_ms=latency_ms,
        )
