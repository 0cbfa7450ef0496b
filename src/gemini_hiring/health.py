"""Health summary for the generation pipeline."""

from __future__ import annotations

import dataclasses
from typing import Any, Literal

from .config import HiringSettings
from .constants import DEGRADED_FAILURE_RATIO, HEALTH_RECENT_ENTRIES
from .pipeline.call_log import PipelineLogger
from .types import LogEntry, PipelineStats

HealthStatus = Literal["healthy", "degraded"]


@dataclasses.dataclass(frozen=True, slots=True)
class HealthReport:
    status: HealthStatus
    api_key_configured: bool
    model: str
    pro_model: str
    stats: PipelineStats
    recent_entries: tuple[LogEntry, ...]

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "config": {
                "api_key_configured": self.api_key_configured,
                "model": self.model,
                "pro_model": self.pro_model,
            },
            "stats": self.stats.to_dict(),
            "recent_calls": [entry.to_dict() for entry in self.recent_entries],
        }


def health_status(stats: PipelineStats, *, api_key_configured: bool) -> HealthStatus:
    """``degraded`` without an API key, or once half or more of all calls failed."""
    if not api_key_configured:
        return "degraded"
    if stats.total_calls > 0 and stats.failure_ratio >= DEGRADED_FAILURE_RATIO:
        return "degraded"
    return "healthy"


def check_health(logger: PipelineLogger, settings: HiringSettings) -> HealthReport:
    """Build the health report from the shared logger and current settings."""
    stats = logger.get_stats()
    return HealthReport(
        status=health_status(stats, api_key_configured=settings.has_api_key),
        api_key_configured=settings.has_api_key,
        model=settings.model,
        pro_model=settings.pro_model,
        stats=stats,
        recent_entries=tuple(logger.get_recent_entries(HEALTH_RECENT_ENTRIES)),
    )
