"""Core data types that flow through the pipeline.

This module defines the immutable data structures that represent a request
as it moves from prompt rendering through the model call to a validated
result, plus the records the pipeline logger keeps about each call.
"""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime
from enum import Enum
import typing

from pydantic import BaseModel

TData = typing.TypeVar("TData", bound=BaseModel)


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


# --- Request side ---


@dataclasses.dataclass(frozen=True, slots=True)
class ModelCallConfig:
    """Provider-neutral settings for a single model call."""

    model: str
    temperature: float = 0.3
    max_output_tokens: int = 8192
    timeout_seconds: float = 60.0
    json_mode: bool = True

    def __post_init__(self) -> None:
        _require(
            condition=bool(self.model), message="must be non-empty", field_name="model"
        )
        _require(
            condition=self.timeout_seconds > 0,
            message="must be positive",
            field_name="timeout_seconds",
        )
        _require(
            condition=self.max_output_tokens > 0,
            message="must be positive",
            field_name="max_output_tokens",
        )


class ModelTier(str, Enum):
    STANDARD = "standard"
    PRO = "pro"


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationProfile:
    """Per-operation generation knobs, resolved against settings at call time.

    ``timeout_seconds`` of ``None`` means "use the configured default".
    """

    temperature: float = 0.3
    max_output_tokens: int = 8192
    tier: ModelTier = ModelTier.STANDARD
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        _require(
            condition=0.0 <= self.temperature <= 2.0,
            message="must be between 0.0 and 2.0",
            field_name="temperature",
        )
        _require(
            condition=self.max_output_tokens > 0,
            message="must be positive",
            field_name="max_output_tokens",
        )
        _require(
            condition=self.timeout_seconds is None or self.timeout_seconds > 0,
            message="must be positive when set",
            field_name="timeout_seconds",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class RenderedPrompt:
    """A fully rendered prompt: system instruction plus user text."""

    system: str
    text: str

    @property
    def length(self) -> int:
        """Character length of the whole prompt (cheap proxy for size)."""
        return len(self.system) + len(self.text)


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineRequest:
    """One call into the pipeline: an operation name and its validated input."""

    operation_name: str
    validated_input: BaseModel


# --- Response side ---


@dataclasses.dataclass(frozen=True, slots=True)
class ModelResponse:
    """Raw model output plus usage metadata, free of provider types."""

    raw_text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: str = "unknown"
    latency_ms: int = 0


@dataclasses.dataclass(frozen=True, slots=True)
class ResultMetadata:
    model_used: str
    input_tokens: int
    output_tokens: int
    latency_ms: int
    coercion_applied: bool
    prompt_version: str = ""
    generated_at: str = dataclasses.field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, typing.Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineResult(typing.Generic[TData]):
    """Successful pipeline output.

    ``data`` has always passed the operation's output schema, either
    directly or after the coercion pass.
    """

    data: TData
    metadata: ResultMetadata

    def to_dict(self) -> dict[str, typing.Any]:
        """Return the stable ``{data, metadata}`` response body."""
        return {
            "data": self.data.model_dump(mode="json"),
            "metadata": self.metadata.to_dict(),
        }


# --- Monitoring ---


@dataclasses.dataclass(frozen=True, slots=True)
class LogEntry:
    """One recorded call attempt. Immutable once written."""

    endpoint: str
    model: str
    latency_ms: int
    input_tokens: int
    output_tokens: int
    stop_reason: str
    validation_passed: bool
    coercion_applied: bool
    error: str | None = None
    error_message: str | None = None
    validation_issues: tuple[dict[str, typing.Any], ...] = ()
    prompt_length: int = 0
    timestamp: str = dataclasses.field(default_factory=utc_now_iso)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "timestamp": self.timestamp,
            "endpoint": self.endpoint,
            "model": self.model,
            "latency_ms": self.latency_ms,
            "tokens": f"{self.input_tokens}+{self.output_tokens}",
            "stop_reason": self.stop_reason,
            "validation_passed": self.validation_passed,
            "coercion_applied": self.coercion_applied,
            "error": self.error,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class EndpointStats:
    calls: int = 0
    failures: int = 0
    coercions: int = 0
    avg_latency_ms: int = 0


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineStats:
    """Snapshot of the process-lifetime counters kept by the pipeline logger."""

    total_calls: int = 0
    failures: int = 0
    coercions: int = 0
    avg_latency_ms: int = 0
    by_endpoint: typing.Mapping[str, EndpointStats] = dataclasses.field(
        default_factory=dict
    )

    @property
    def failure_ratio(self) -> float:
        if self.total_calls == 0:
            return 0.0
        return self.failures / self.total_calls

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "total_calls": self.total_calls,
            "failures": self.failures,
            "coercions": self.coercions,
            "avg_latency_ms": self.avg_latency_ms,
            "by_endpoint": {
                name: dataclasses.asdict(stats)
                for name, stats in self.by_endpoint.items()
            },
        }
