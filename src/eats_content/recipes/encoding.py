"""Render canonical recipes back into the blob JSON shape."""

from __future__ import annotations

import json
from typing import Any

from eats_content.recipes.classifier import BLOB_TAG
from eats_content.recipes.models import CanonicalRecipe, NutritionFacts
from eats_content.recipes.variants.blob_decoder import BLOB_PAYLOAD_FIELD


def _nutrition_payload(nutrition: NutritionFacts | None) -> dict[str, Any] | None:
    if nutrition is None:
        return None
    return {
        "calories": nutrition.calories,
        "protein": nutrition.protein,
        "carbohydrates": nutrition.carbohydrates,
        "fat": nutrition.fat,
        "fiber": nutrition.fiber,
        "sugar": nutrition.sugar,
        "sodium": nutrition.sodium,
        "servingSize": nutrition.serving_size,
    }


def recipe_to_payload(recipe: CanonicalRecipe) -> dict[str, Any]:
    """Blob-shaped payload. Derived total time and provenance are not emitted."""

    return {
        "id": recipe.id,
        "title": recipe.title,
        "slug": recipe.slug,
        "description": recipe.description,
        "prepTime": recipe.prep_minutes,
        "cookTime": recipe.cook_minutes,
        "servings": recipe.servings,
        "yield": recipe.yield_text,
        "difficulty": recipe.difficulty,
        "ingredientSections": [
            {
                "sectionTitle": section.title,
                "items": [{"text": line.text, "optional": line.optional} for line in section.items],
            }
            for section in recipe.ingredient_sections
        ],
        "steps": [{"instruction": step.instruction, "tip": step.tip} for step in recipe.steps],
        "nutrition": _nutrition_payload(recipe.nutrition),
        "equipment": list(recipe.equipment),
        "tags": list(recipe.tags),
        "keywords": list(recipe.keywords),
        "author": recipe.author,
    }


def encode_blob(recipe: CanonicalRecipe) -> str:
    return json.dumps(recipe_to_payload(recipe), ensure_ascii=False)


def to_blob_document(recipe: CanonicalRecipe) -> dict[str, Any]:
    """Wrap a recipe as a raw blob-variant document."""

    document: dict[str, Any] = {"_type": BLOB_TAG, BLOB_PAYLOAD_FIELD: encode_blob(recipe)}
    if recipe.id is not None:
        document["_id"] = recipe.id
    return document
