"""Shared contract for per-variant payload sources."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(slots=True)
class PayloadExtraction:
    """Intermediate payload in the blob JSON shape, plus provenance."""

    payload: dict[str, Any]
    used_legacy_fields: tuple[str, ...] = field(default_factory=tuple)

    @property
    def used_legacy_field(self) -> bool:
        return bool(self.used_legacy_fields)


@runtime_checkable
class PayloadSource(Protocol):
    """Protocol every variant handler implements."""

    def extract(self, document: Mapping[str, Any]) -> PayloadExtraction:
        """Assemble the intermediate payload for one raw document."""
