"""Final assembly of canonical recipes from validated fields."""

from __future__ import annotations

from dataclasses import dataclass

from eats_content.recipes.errors import RecipeValidationError, ValidationIssue
from eats_content.recipes.models import CanonicalRecipe, ValidatedRecipe, Variant
from eats_content.recipes.text import slugify


@dataclass(frozen=True, slots=True)
class VariantMetadata:
    """What the builder needs to know about where the fields came from."""

    variant: Variant
    used_legacy_fields: tuple[str, ...] = ()


def derive_total_minutes(prep_minutes: int | None, cook_minutes: int | None) -> int | None:
    """Total time exists only when both parts are known."""

    if prep_minutes is None or cook_minutes is None:
        return None
    return prep_minutes + cook_minutes


class RecipeBuilder:
    """Merge point for both variants: derive, stamp provenance, assert invariants.

    Slugs are a pure function of the title; uniqueness across recipes is
    enforced by the content store, not here.
    """

    def build(self, fields: ValidatedRecipe, metadata: VariantMetadata) -> CanonicalRecipe:
        if metadata.variant is Variant.UNKNOWN:
            raise ValueError("Cannot build a recipe for an unknown variant")

        issues: list[ValidationIssue] = []
        if not fields.title:
            issues.append(ValidationIssue("title", "required", "is required"))
        if not fields.ingredient_sections or not all(section.items for section in fields.ingredient_sections):
            issues.append(
                ValidationIssue("ingredientSections", "empty", "must contain at least one ingredient")
            )
        if not fields.steps:
            issues.append(ValidationIssue("steps", "empty", "must contain at least one step"))

        slug = fields.slug or slugify(fields.title)
        if not slug and fields.title:
            issues.append(
                ValidationIssue("slug", "format", "cannot be derived from title; supply an explicit slug")
            )
        if issues:
            raise RecipeValidationError(tuple(issues))

        return CanonicalRecipe(
            id=fields.id,
            slug=slug,
            title=fields.title,
            description=fields.description,
            prep_minutes=fields.prep_minutes,
            cook_minutes=fields.cook_minutes,
            total_minutes=derive_total_minutes(fields.prep_minutes, fields.cook_minutes),
            servings=fields.servings,
            yield_text=fields.yield_text,
            difficulty=fields.difficulty,
            ingredient_sections=fields.ingredient_sections,
            steps=fields.steps,
            nutrition=fields.nutrition,
            equipment=fields.equipment,
            tags=fields.tags,
            keywords=fields.keywords,
            author=fields.author,
            source_variant=metadata.variant,
            legacy_fields=metadata.used_legacy_fields,
        )
