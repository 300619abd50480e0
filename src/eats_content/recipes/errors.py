"""Domain errors raised inside the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DecodeErrorKind(str, Enum):
    MALFORMED = "malformed"
    WRONG_SHAPE = "wrong_shape"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One violated schema constraint, addressed by payload path."""

    path: str
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class BlobDecodeError(Exception):
    """Raised when a blob document's JSON text cannot become a payload."""

    kind: DecodeErrorKind
    message: str
    path: str | None = None
    position: int | None = None
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (line={self.line}, column={self.column}, position={self.position})"


@dataclass(slots=True)
class FieldExtractionError(Exception):
    """Raised when a structured document lacks a field that has no default."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class RecipeValidationError(Exception):
    """Aggregated schema violations for a single payload."""

    issues: tuple[ValidationIssue, ...]

    def __str__(self) -> str:
        if not self.issues:
            return "Recipe payload failed validation"
        details = "; ".join(str(issue) for issue in self.issues)
        return f"Recipe payload failed validation with {len(self.issues)} error(s): {details}"
