"""Recipe normalization: two content-store variants in, one canonical recipe out."""

from .adapter import RecipeAdapter, build_adapter
from .classifier import classify
from .encoding import encode_blob, recipe_to_payload, to_blob_document
from .errors import ValidationIssue
from .models import CanonicalRecipe, IngredientLine, IngredientSection, NutritionFacts, Step, Variant
from .outcome import ConversionOutcome, ErrorKind, Failure, Success

__all__ = [
    "CanonicalRecipe",
    "ConversionOutcome",
    "ErrorKind",
    "Failure",
    "IngredientLine",
    "IngredientSection",
    "NutritionFacts",
    "RecipeAdapter",
    "Step",
    "Success",
    "ValidationIssue",
    "Variant",
    "build_adapter",
    "classify",
    "encode_blob",
    "recipe_to_payload",
    "to_blob_document",
]
