"""Tagged conversion outcomes returned across the adapter boundary."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from eats_content.recipes.errors import ValidationIssue
from eats_content.recipes.models import CanonicalRecipe


class ErrorKind(str, Enum):
    UNKNOWN_VARIANT = "UnknownVariant"
    DECODE_MALFORMED = "DecodeMalformed"
    DECODE_WRONG_SHAPE = "DecodeWrongShape"
    EXTRACT_ERROR = "ExtractError"
    VALIDATION_FAILED = "ValidationFailed"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True, slots=True)
class Success:
    recipe: CanonicalRecipe


@dataclass(frozen=True, slots=True)
class Failure:
    """A rejected document. Never carries a partial recipe."""

    kind: ErrorKind
    message: str
    path: str | None = None
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def paths(self) -> list[str]:
        """Every offending path, for editor-facing error lists."""

        if self.issues:
            return [issue.path for issue in self.issues]
        return [self.path] if self.path else []


ConversionOutcome = Union[Success, Failure]
