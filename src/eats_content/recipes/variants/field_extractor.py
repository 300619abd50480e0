"""Assemble structured-variant documents into the shared payload shape.

The structured variant stores every recipe attribute as its own field. This
module only moves values into place and applies field defaults; type and range
checks belong to the validator, so unexpected values are passed through
unchanged for it to report.

Legacy fallbacks follow one precedence rule: the canonical field wins whenever
it is present (even if the legacy field is present too); the legacy field is
read only when the canonical one is absent, and its name is recorded in
``PayloadExtraction.used_legacy_fields``.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from eats_content.recipes.errors import FieldExtractionError
from eats_content.recipes.models import DEFAULT_DIFFICULTY
from eats_content.recipes.variants.base import PayloadExtraction

LOGGER = logging.getLogger(__name__)

INGREDIENT_SECTIONS_FIELD = "ingredientSections"
LEGACY_INGREDIENTS_FIELD = "ingredients"
EQUIPMENT_ITEMS_FIELD = "equipmentItems"
LEGACY_EQUIPMENT_FIELD = "equipment"

_PASSTHROUGH_FIELDS = (
    "description",
    "prepTime",
    "cookTime",
    "yield",
    "nutrition",
    "tags",
    "keywords",
)


def _slug_value(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("current")
    return raw


def _author_value(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("name")
    return raw


def _ingredient_item(raw: Any) -> Any:
    if isinstance(raw, str):
        return {"text": raw, "optional": False}
    if isinstance(raw, Mapping):
        return {"text": raw.get("text"), "optional": raw.get("isOptional")}
    return raw


def _ingredient_section(raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        return raw
    items = raw.get("ingredients")
    if isinstance(items, list):
        items = [_ingredient_item(item) for item in items]
    return {"sectionTitle": raw.get("title"), "items": items}


def _step(raw: Any) -> Any:
    if isinstance(raw, str):
        return {"instruction": raw, "tip": None}
    if isinstance(raw, Mapping):
        return {"instruction": raw.get("text"), "tip": raw.get("tip")}
    return raw


def _equipment_name(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("name")
    return raw


class FieldExtractor:
    """Map a structured document's individual fields onto the payload shape."""

    def extract(self, document: Mapping[str, Any]) -> PayloadExtraction:
        if document.get("title") is None:
            raise FieldExtractionError("title", "Structured recipe has no title")

        legacy_fields: list[str] = []
        sections = self._ingredient_sections(document, legacy_fields)
        steps = self._steps(document)
        equipment = self._equipment(document, legacy_fields)

        difficulty = document.get("difficulty")
        payload: dict[str, Any] = {
            "id": document.get("_id"),
            "title": document.get("title"),
            "slug": _slug_value(document.get("slug")),
            "servings": document.get("servings"),
            "difficulty": DEFAULT_DIFFICULTY if difficulty is None else difficulty,
            "ingredientSections": sections,
            "steps": steps,
            "equipment": equipment,
            "author": _author_value(document.get("author")),
        }
        for name in _PASSTHROUGH_FIELDS:
            payload[name] = document.get(name)

        if legacy_fields:
            LOGGER.info(
                "Structured recipe %s read legacy field(s): %s",
                document.get("_id"),
                ", ".join(legacy_fields),
            )
        return PayloadExtraction(payload=payload, used_legacy_fields=tuple(legacy_fields))

    def _ingredient_sections(self, document: Mapping[str, Any], legacy_fields: list[str]) -> Any:
        canonical = document.get(INGREDIENT_SECTIONS_FIELD)
        if canonical is not None:
            if isinstance(canonical, list):
                return [_ingredient_section(section) for section in canonical]
            return canonical

        legacy = document.get(LEGACY_INGREDIENTS_FIELD)
        if legacy is None:
            raise FieldExtractionError(
                INGREDIENT_SECTIONS_FIELD,
                f"Structured recipe has neither '{INGREDIENT_SECTIONS_FIELD}' "
                f"nor legacy '{LEGACY_INGREDIENTS_FIELD}'",
            )

        legacy_fields.append(LEGACY_INGREDIENTS_FIELD)
        if not isinstance(legacy, list):
            return legacy
        if not legacy:
            return []
        return [{"sectionTitle": None, "items": [_ingredient_item(item) for item in legacy]}]

    def _steps(self, document: Mapping[str, Any]) -> Any:
        steps = document.get("steps")
        if steps is None:
            raise FieldExtractionError("steps", "Structured recipe has no steps")
        if isinstance(steps, list):
            return [_step(step) for step in steps]
        return steps

    def _equipment(self, document: Mapping[str, Any], legacy_fields: list[str]) -> Any:
        canonical = document.get(EQUIPMENT_ITEMS_FIELD)
        if canonical is not None:
            if isinstance(canonical, list):
                return [_equipment_name(item) for item in canonical]
            return canonical

        legacy = document.get(LEGACY_EQUIPMENT_FIELD)
        if legacy is None:
            return None
        legacy_fields.append(LEGACY_EQUIPMENT_FIELD)
        return legacy
