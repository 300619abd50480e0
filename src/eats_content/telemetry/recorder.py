"""Bounded in-memory log of conversion attempts with aggregate statistics."""

from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass
import logging
import threading
from types import MappingProxyType
from typing import Any, Mapping

LOGGER = logging.getLogger(__name__)

DEFAULT_CAPACITY = 500
OUTCOME_SUCCESS = "success"
OUTCOME_FAILURE = "failure"
_UNSPECIFIED_KIND = "Unspecified"


@dataclass(frozen=True, slots=True)
class TelemetryEvent:
    """One conversion attempt. ``timestamp`` is epoch seconds."""

    timestamp: float
    document_id: str | None
    variant: str
    outcome: str
    duration_ms: float
    error_kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "documentId": self.document_id,
            "variant": self.variant,
            "outcome": self.outcome,
            "durationMs": self.duration_ms,
            "errorKind": self.error_kind,
        }


@dataclass(frozen=True, slots=True)
class TelemetrySnapshot:
    """Read-only view for the monitoring poller.

    ``success_rate`` and ``errors_by_kind`` cover every attempt recorded since
    process start; ``recent`` holds at most the buffer capacity, oldest first.
    """

    success_rate: float
    errors_by_kind: Mapping[str, int]
    recent: tuple[TelemetryEvent, ...]
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "successRate": self.success_rate,
            "errorsByKind": dict(self.errors_by_kind),
            "recent": [event.to_dict() for event in self.recent],
            "total": self.total,
        }


def _kind_key(error_kind: Any) -> str:
    value = getattr(error_kind, "value", error_kind)
    if value is None:
        return _UNSPECIFIED_KIND
    return value if isinstance(value, str) else repr(value)


class TelemetryRecorder:
    """Fixed-capacity ring buffer of events; the oldest entry is evicted first.

    One lock guards the buffer and counters. Writers and snapshot readers are
    serialized by it, readers holding it only long enough to copy the buffer.
    Only ``TelemetryEvent`` instances are kept in the buffer; anything else is
    counted as an unspecified failure and dropped.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._events: deque[TelemetryEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._total = 0
        self._successes = 0
        self._errors_by_kind: Counter[str] = Counter()

    @property
    def capacity(self) -> int:
        return self._capacity

    def record(self, event: TelemetryEvent) -> None:
        """Append an event. Never raises."""

        try:
            succeeded = getattr(event, "outcome", None) == OUTCOME_SUCCESS
            kind = None if succeeded else _kind_key(getattr(event, "error_kind", None))
            keep = isinstance(event, TelemetryEvent)
            with self._lock:
                if keep:
                    self._events.append(event)
                self._total += 1
                if succeeded:
                    self._successes += 1
                else:
                    self._errors_by_kind[kind] += 1
        except Exception:
            LOGGER.error("Failed to record telemetry event %r", event, exc_info=True)
            return
        if not keep:
            LOGGER.warning("Counted non-event telemetry record %r without storing it", event)

    def snapshot(self) -> TelemetrySnapshot:
        with self._lock:
            recent = tuple(self._events)
            total = self._total
            successes = self._successes
            errors_by_kind = dict(self._errors_by_kind)

        success_rate = successes / total if total else 0.0
        return TelemetrySnapshot(
            success_rate=success_rate,
            errors_by_kind=MappingProxyType(errors_by_kind),
            recent=recent,
            total=total,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
