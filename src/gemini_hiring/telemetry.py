"""Stage timing for the generation pipeline.

The pipeline wraps each stage (``prompt.build``, ``model.call``,
``response.validate``) in a telemetry scope. When telemetry is off, or no
reporter is attached, every scope is a shared no-op object.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import os
import time
from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable

log = logging.getLogger(__name__)

_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar(
    "gemini_hiring_scope_stack",
    default=(),
)

# Evaluated once at import time
_TELEMETRY_ENABLED = os.getenv("GEMINI_HIRING_TELEMETRY") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Receives stage timings and point metrics."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetry:
    """Stateless stand-in used whenever telemetry is off."""

    enabled: bool = False

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass


class _ActiveTelemetry:
    """Telemetry that forwards scope timings and metrics to reporters."""

    __slots__ = ("reporters",)

    enabled = True

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager[_ActiveTelemetry]:
        return self._scope(name, **metadata)

    @contextmanager
    def _scope(self, name: str, **metadata: Any) -> Iterator[_ActiveTelemetry]:
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")

        parent = _scope_stack_var.get()
        scope_path = ".".join((*parent, name))
        token = _scope_stack_var.set((*parent, name))
        started = time.perf_counter()
        failed = False
        try:
            yield self
        except BaseException:
            failed = True
            raise
        finally:
            duration = time.perf_counter() - started
            _scope_stack_var.reset(token)
            self._dispatch(
                "record_timing",
                scope_path,
                duration,
                depth=len(parent),
                failed=failed,
                **metadata,
            )

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record a point value under the current scope."""
        parent = _scope_stack_var.get()
        scope_path = ".".join((*parent, name))
        self._dispatch("record_metric", scope_path, value, depth=len(parent), **metadata)

    def _dispatch(self, method: str, scope: str, value: Any, **metadata: Any) -> None:
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )


_NO_OP = _NoOpTelemetry()

type Telemetry = _ActiveTelemetry | _NoOpTelemetry


def TelemetryContext(*reporters: TelemetryReporter) -> Telemetry:  # noqa: N802
    """Return an active telemetry context, or the shared no-op one.

    Telemetry is active only when ``GEMINI_HIRING_TELEMETRY=1`` is set and at
    least one reporter is supplied.
    """
    if _TELEMETRY_ENABLED and reporters:
        return _ActiveTelemetry(*reporters)
    return _NO_OP


class InMemoryReporter:
    """Keeps recent timings and metrics per scope, for development use."""

    def __init__(self, max_entries_per_scope: int = 500):
        self.max_entries = max_entries_per_scope
        self.timings: defaultdict[str, deque[float]] = defaultdict(
            lambda: deque(maxlen=self.max_entries)
        )
        self.metrics: defaultdict[str, deque[Any]] = defaultdict(
            lambda: deque(maxlen=self.max_entries)
        )

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:  # noqa: ARG002
        self.timings[scope].append(duration)

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:  # noqa: ARG002
        self.metrics[scope].append(value)

    def summary(self) -> dict[str, dict[str, float]]:
        """Per-scope call count, mean and max duration in milliseconds."""
        result: dict[str, dict[str, float]] = {}
        for scope, durations in sorted(self.timings.items()):
            if not durations:
                continue
            result[scope] = {
                "calls": len(durations),
                "avg_ms": round(sum(durations) / len(durations) * 1000, 2),
                "max_ms": round(max(durations) * 1000, 2),
            }
        return result
