"""Conversion telemetry for operational monitoring."""

from .recorder import (
    DEFAULT_CAPACITY,
    OUTCOME_FAILURE,
    OUTCOME_SUCCESS,
    TelemetryEvent,
    TelemetryRecorder,
    TelemetrySnapshot,
)

__all__ = [
    "DEFAULT_CAPACITY",
    "OUTCOME_FAILURE",
    "OUTCOME_SUCCESS",
    "TelemetryEvent",
    "TelemetryRecorder",
    "TelemetrySnapshot",
]
