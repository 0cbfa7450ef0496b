"""The structured-generation pipeline.

One ``run`` call takes an operation name and its validated input through
prompt rendering, a single model call and response validation, and records
exactly one ``LogEntry`` for the attempt, success or failure. The only
exception is cancellation: a call cancelled while waiting on the model
leaves no entry behind.

The engine knows nothing about individual operations; everything
operation-specific lives in the ``OperationDescriptor``.
"""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any

from pydantic import BaseModel

from gemini_hiring.client import ModelClient
from gemini_hiring.config import HiringSettings
from gemini_hiring.constants import (
    STOP_REASON_MAX_TOKENS,
    STOP_REASON_NOT_SENT,
    STOP_REASON_UNKNOWN,
)
from gemini_hiring.exceptions import (
    GeminiHiringError,
    OutputTruncatedError,
    OutputValidationError,
    ProviderTransportError,
    TemplateRenderError,
)
from gemini_hiring.prompts import build_prompt
from gemini_hiring.registry import (
    Operation,
    OperationDescriptor,
    OperationRegistry,
    default_registry,
)
from gemini_hiring.response import Coercer, validate_response
from gemini_hiring.telemetry import Telemetry, TelemetryContext
from gemini_hiring.types import (
    LogEntry,
    ModelCallConfig,
    ModelResponse,
    PipelineRequest,
    PipelineResult,
    RenderedPrompt,
    ResultMetadata,
)

from .call_log import PipelineLogger

log = logging.getLogger(__name__)


class StructuredGenerationPipeline:
    """Runs registered operations against a model client.

    Args:
        model_client: Anything implementing the ``ModelClient`` protocol.
        logger: The shared ``PipelineLogger`` to record call outcomes in.
        settings: Model names and timeouts; read from the environment when
            omitted.
        registry: Operations to serve; the seven default ones when omitted.
        coercer: Coercion rules for almost-valid output.
        telemetry: Stage timing context; a no-op unless enabled.
    """

    def __init__(
        self,
        model_client: ModelClient,
        logger: PipelineLogger,
        *,
        settings: HiringSettings | None = None,
        registry: OperationRegistry | None = None,
        coercer: Coercer | None = None,
        telemetry: Telemetry | None = None,
    ) -> None:
        self.model_client = model_client
        self.logger = logger
        self.settings = settings if settings is not None else HiringSettings()
        self.registry = registry if registry is not None else default_registry()
        self.coercer = coercer or Coercer()
        self.tele = telemetry or TelemetryContext()

    async def execute(self, request: PipelineRequest) -> PipelineResult[Any]:
        return await self.run(request.operation_name, request.validated_input)

    async def run(
        self, operation: str | Operation, validated_input: BaseModel
    ) -> PipelineResult[Any]:
        """Generate, validate and return the output of one operation.

        Args:
            operation: Registered operation name.
            validated_input: Instance of the operation's input schema.

        Returns:
            ``PipelineResult`` whose ``data`` satisfies the output schema.

        Raises:
            UnknownOperationError: ``operation`` is not registered (not logged).
            TemplateRenderError: The input does not fit the template.
            ProviderAuthError: Missing or rejected credentials.
            ProviderRateLimitError: The provider throttled the call.
            ProviderTransportError: Timeout, network or provider failure.
            OutputValidationError: Output still invalid after coercion.
        """
        descriptor = self.registry.get(operation)
        call_config = self.settings.call_config_for(descriptor)

        with self.tele("pipeline.run", operation=descriptor.name):
            try:
                with self.tele("prompt.build"):
                    prompt = build_prompt(descriptor, validated_input)
            except TemplateRenderError as e:
                self._record_failure(descriptor, call_config, e)
                raise

            response = await self._call_model(descriptor, call_config, prompt)

            try:
                with self.tele("response.validate"):
                    outcome = validate_response(
                        response.raw_text, descriptor.output_schema, self.coercer
                    )
            except OutputValidationError as e:
                error = self._classify_output_failure(e, response, call_config)
                self._record_failure(
                    descriptor,
                    call_config,
                    error,
                    response=response,
                    prompt_length=prompt.length,
                )
                if error is e:
                    raise
                raise error from e
            except Exception as e:
                # Custom coercion rules can raise anything
                message = (
                    f"Response validation failed unexpectedly ({type(e).__name__})"
                )
                issues = [{"loc": [], "msg": message, "type": "validation_error"}]
                error = OutputValidationError(
                    message,
                    issues=issues,
                    final_issues=issues,
                    schema=descriptor.output_schema.__name__,
                )
                self._record_failure(
                    descriptor,
                    call_config,
                    error,
                    response=response,
                    prompt_length=prompt.length,
                )
                raise error from e

        self.logger.record(
            LogEntry(
                endpoint=descriptor.name,
                model=response.model,
                latency_ms=response.latency_ms,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                stop_reason=response.stop_reason,
                validation_passed=True,
                coercion_applied=outcome.coercion_applied,
                prompt_length=prompt.length,
            )
        )
        if outcome.repairs:
            log.debug("%s repairs: %s", descriptor.name, "; ".join(outcome.repairs))

        return PipelineResult(
            data=outcome.data,
            metadata=ResultMetadata(
                model_used=response.model,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                latency_ms=response.latency_ms,
                coercion_applied=outcome.coercion_applied,
                prompt_version=descriptor.prompt_version,
            ),
        )

    async def _call_model(
        self,
        descriptor: OperationDescriptor,
        call_config: ModelCallConfig,
        prompt: RenderedPrompt,
    ) -> ModelResponse:
        start = perf_counter()

        def record(error: GeminiHiringError) -> None:
            self._record_failure(
                descriptor,
                call_config,
                error,
                latency_ms=int((perf_counter() - start) * 1000),
                stop_reason=STOP_REASON_UNKNOWN,
                prompt_length=prompt.length,
            )

        try:
            with self.tele("model.call", model=call_config.model):
                return await self.model_client.call(prompt, call_config)
        except asyncio.CancelledError:
            raise
        except GeminiHiringError as e:
            record(e)
            raise
        except Exception as e:
            # Model clients are expected to translate their own failures
            error = ProviderTransportError(
                f"Model client failed unexpectedly ({type(e).__name__})",
                retryable=False,
                model=call_config.model,
            )
            record(error)
            raise error from e

    def _classify_output_failure(
        self,
        error: OutputValidationError,
        response: ModelResponse,
        call_config: ModelCallConfig,
    ) -> OutputValidationError:
        if response.stop_reason != STOP_REASON_MAX_TOKENS:
            return error
        return OutputTruncatedError(
            max_output_tokens=call_config.max_output_tokens,
            output_tokens=response.output_tokens,
            issues=error.issues,
            final_issues=error.final_issues,
            model=response.model,
        )

    def _record_failure(
        self,
        descriptor: OperationDescriptor,
        call_config: ModelCallConfig,
        error: GeminiHiringError,
        *,
        response: ModelResponse | None = None,
        latency_ms: int = 0,
        stop_reason: str = STOP_REASON_NOT_SENT,
        prompt_length: int = 0,
    ) -> None:
        issues = getattr(error, "final_issues", None) or getattr(error, "issues", None)
        self.logger.record(
            LogEntry(
                endpoint=descriptor.name,
                model=response.model if response else call_config.model,
                latency_ms=response.latency_ms if response else latency_ms,
                input_tokens=response.input_tokens if response else 0,
                output_tokens=response.output_tokens if response else 0,
                stop_reason=response.stop_reason if response else stop_reason,
                validation_passed=False,
                coercion_applied=False,
                error=error.kind.value,
                error_message=error.message,
                validation_issues=tuple(issues or ()),
                prompt_length=prompt_length,
            )
        )
