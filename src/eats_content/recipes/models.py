"""Canonical recipe structures shared by both content-store variants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

TITLE_MAX_LENGTH = 200
SLUG_MAX_LENGTH = 96
MAX_STEP_MINUTES = 1440
DEFAULT_DIFFICULTY = "medium"
DIFFICULTIES = ("easy", "medium", "hard")


class Variant(str, Enum):
    """Input shape of a raw content-store document."""

    STRUCTURED = "structured"
    BLOB = "blob"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class IngredientLine:
    """One free-text ingredient line."""

    text: str
    optional: bool = False


@dataclass(frozen=True, slots=True)
class IngredientSection:
    """Ordered ingredient lines with an optional heading ("For the sauce")."""

    items: tuple[IngredientLine, ...]
    title: str | None = None


@dataclass(frozen=True, slots=True)
class Step:
    instruction: str
    tip: str | None = None


@dataclass(frozen=True, slots=True)
class NutritionFacts:
    """Per-serving nutrition. Macros are grams, sodium is milligrams."""

    calories: int | None = None
    protein: float | None = None
    carbohydrates: float | None = None
    fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    serving_size: str | None = None


@dataclass(frozen=True, slots=True)
class ValidatedRecipe:
    """Schema-checked fields before derived values are filled in."""

    title: str
    ingredient_sections: tuple[IngredientSection, ...]
    steps: tuple[Step, ...]
    id: str | None = None
    slug: str | None = None
    description: str | None = None
    prep_minutes: int | None = None
    cook_minutes: int | None = None
    servings: int | None = None
    yield_text: str | None = None
    difficulty: str = DEFAULT_DIFFICULTY
    nutrition: NutritionFacts | None = None
    equipment: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    author: str | None = None


@dataclass(frozen=True, slots=True)
class CanonicalRecipe:
    """The normalized recipe entity every downstream consumer works with.

    ``total_minutes`` is always derived from prep and cook time and
    ``source_variant`` records which input shape produced the entity.
    ``legacy_fields`` names structured-variant fields that were read through
    their legacy fallback so editors can be prompted to migrate them.
    """

    slug: str
    title: str
    ingredient_sections: tuple[IngredientSection, ...]
    steps: tuple[Step, ...]
    source_variant: Variant
    id: str | None = None
    description: str | None = None
    prep_minutes: int | None = None
    cook_minutes: int | None = None
    total_minutes: int | None = None
    servings: int | None = None
    yield_text: str | None = None
    difficulty: str = DEFAULT_DIFFICULTY
    nutrition: NutritionFacts | None = None
    equipment: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    author: str | None = None
    legacy_fields: tuple[str, ...] = ()

    @property
    def used_legacy_field(self) -> bool:
        return bool(self.legacy_fields)
