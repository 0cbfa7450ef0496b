"""Structured generation for recruitment workflows on Gemini."""

import importlib.metadata
import logging

from gemini_hiring.client import GeminiModelClient, ModelClient
from gemini_hiring.config import HiringSettings
from gemini_hiring.exceptions import (
    ErrorKind,
    GeminiHiringError,
    InputValidationError,
    OutputTruncatedError,
    OutputValidationError,
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderTransportError,
    TemplateRenderError,
    UnknownOperationError,
)
from gemini_hiring.health import HealthReport, check_health
from gemini_hiring.pipeline import PipelineLogger, StructuredGenerationPipeline
from gemini_hiring.prompts import build_prompt
from gemini_hiring.registry import (
    Operation,
    OperationDescriptor,
    OperationRegistry,
    default_registry,
    parse_input,
)
from gemini_hiring.response import Coercer, validate_response
from gemini_hiring.responses import ErrorResponse, to_error_response
from gemini_hiring.telemetry import TelemetryContext, TelemetryReporter
from gemini_hiring.types import (
    LogEntry,
    ModelCallConfig,
    ModelResponse,
    PipelineRequest,
    PipelineResult,
    PipelineStats,
    RenderedPrompt,
    ResultMetadata,
)

try:
    __version__ = importlib.metadata.version("gemini-hiring")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library code never configures handlers; applications do.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Pipeline
    "StructuredGenerationPipeline",
    "PipelineLogger",
    "PipelineRequest",
    "PipelineResult",
    "ResultMetadata",
    "LogEntry",
    "PipelineStats",
    # Operations
    "Operation",
    "OperationDescriptor",
    "OperationRegistry",
    "default_registry",
    "parse_input",
    # Building blocks
    "build_prompt",
    "RenderedPrompt",
    "ModelClient",
    "GeminiModelClient",
    "ModelCallConfig",
    "ModelResponse",
    "validate_response",
    "Coercer",
    # Configuration, health and telemetry
    "HiringSettings",
    "check_health",
    "HealthReport",
    "TelemetryContext",
    "TelemetryReporter",
    # Errors
    "ErrorKind",
    "GeminiHiringError",
    "InputValidationError",
    "UnknownOperationError",
    "TemplateRenderError",
    "ProviderTransportError",
    "ProviderAuthError",
    "ProviderRateLimitError",
    "OutputValidationError",
    "OutputTruncatedError",
    "ErrorResponse",
    "to_error_response",
]
