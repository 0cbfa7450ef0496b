"""Pipeline engine and call log."""

from .call_log import PipelineLogger
from .engine import StructuredGenerationPipeline

__all__ = ["PipelineLogger", "StructuredGenerationPipeline"]
