"""Runtime configuration for the recipe normalization layer."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from eats_content.telemetry.recorder import DEFAULT_CAPACITY


DEFAULT_TELEMETRY_CAPACITY = DEFAULT_CAPACITY
DEFAULT_TITLE_MAX_LENGTH = 200
DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class AdapterSettings:
    """Validated settings for building a recipe adapter."""

    telemetry_capacity: int = DEFAULT_TELEMETRY_CAPACITY
    title_max_length: int = DEFAULT_TITLE_MAX_LENGTH
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AdapterSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        capacity_raw = source.get("EATS_TELEMETRY_CAPACITY", str(DEFAULT_TELEMETRY_CAPACITY)).strip()
        title_raw = source.get("EATS_TITLE_MAX_LENGTH", str(DEFAULT_TITLE_MAX_LENGTH)).strip()
        log_level = source.get("EATS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()

        if not capacity_raw:
            raise ValueError("EATS_TELEMETRY_CAPACITY cannot be empty")
        if not title_raw:
            raise ValueError("EATS_TITLE_MAX_LENGTH cannot be empty")
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"EATS_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")

        return cls(
            telemetry_capacity=_parse_positive_int(name="EATS_TELEMETRY_CAPACITY", raw_value=capacity_raw),
            title_max_length=_parse_positive_int(name="EATS_TITLE_MAX_LENGTH", raw_value=title_raw),
            log_level=log_level,
        )
