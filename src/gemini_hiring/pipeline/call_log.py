"""Bounded in-memory record of pipeline calls, plus lifetime counters.

One ``PipelineLogger`` is built by the application and injected into the
pipeline and the health check. Tests build their own isolated instances.
"""

from __future__ import annotations

from collections import deque
import logging
import threading

from gemini_hiring.constants import DEFAULT_LOG_BUFFER_CAPACITY, DEFAULT_RECENT_ENTRIES
from gemini_hiring.exceptions import ErrorKind
from gemini_hiring.types import EndpointStats, LogEntry, PipelineStats

log = logging.getLogger(__name__)


class _Counters:
    __slots__ = ("calls", "coercions", "failures", "latency_total_ms")

    def __init__(self) -> None:
        self.calls = 0
        self.failures = 0
        self.coercions = 0
        self.latency_total_ms = 0

    def add(self, entry: LogEntry) -> None:
        self.calls += 1
        self.latency_total_ms += entry.latency_ms
        if entry.failed:
            self.failures += 1
        if entry.coercion_applied:
            self.coercions += 1

    @property
    def avg_latency_ms(self) -> int:
        return round(self.latency_total_ms / self.calls) if self.calls else 0


class PipelineLogger:
    """Ring buffer of recent ``LogEntry`` records and never-reset counters.

    Counters track every entry ever recorded and are unaffected by eviction
    from the buffer. All state changes happen under a single lock, so
    ``total_calls`` always equals the number of ``record`` calls and
    ``failures <= total_calls`` holds in every snapshot.
    """

    def __init__(self, capacity: int = DEFAULT_LOG_BUFFER_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._totals = _Counters()
        self._by_endpoint: dict[str, _Counters] = {}
        self._lock = threading.Lock()

    def record(self, entry: LogEntry) -> None:
        """Store ``entry``, update counters and emit one log line."""
        with self._lock:
            self._entries.append(entry)
            self._totals.add(entry)
            self._by_endpoint.setdefault(entry.endpoint, _Counters()).add(entry)
        self._emit(entry)

    def get_stats(self) -> PipelineStats:
        """Snapshot of lifetime counters."""
        with self._lock:
            return PipelineStats(
                total_calls=self._totals.calls,
                failures=self._totals.failures,
                coercions=self._totals.coercions,
                avg_latency_ms=self._totals.avg_latency_ms,
                by_endpoint={
                    name: EndpointStats(
                        calls=counters.calls,
                        failures=counters.failures,
                        coercions=counters.coercions,
                        avg_latency_ms=counters.avg_latency_ms,
                    )
                    for name, counters in self._by_endpoint.items()
                },
            )

    def get_recent_entries(self, n: int = DEFAULT_RECENT_ENTRIES) -> list[LogEntry]:
        """Up to ``min(n, capacity)`` entries, most recent first."""
        if n <= 0:
            return []
        with self._lock:
            snapshot = list(self._entries)
        return snapshot[::-1][:n]

    def _emit(self, entry: LogEntry) -> None:
        parts = [
            f"[AI:{entry.endpoint}]",
            f"model={entry.model}",
            f"tokens={entry.input_tokens}+{entry.output_tokens}",
            f"latency={entry.latency_ms}ms",
            f"stop={entry.stop_reason}",
        ]
        if entry.coercion_applied:
            parts.append("COERCED")
        if entry.error:
            parts.append(f"ERROR={entry.error}")
        line = " ".join(parts)

        if entry.error == ErrorKind.TEMPLATE_RENDER.value:
            log.critical("%s %s", line, entry.error_message or "")
        elif entry.error:
            log.error("%s %s", line, entry.error_message or "")
        elif entry.coercion_applied:
            log.warning("%s", line)
        else:
            log.info("%s", line)
