"""Schema validation and coercion for intermediate recipe payloads.

Every field is checked and all violations are collected before reporting, so a
single pass tells an editor everything that needs fixing. Compatible values are
coerced (digit strings and ISO-8601 durations become minutes, text is cleaned of
control characters and surplus whitespace); incompatible ones are rejected.
Out-of-range numbers are errors, never clamped.
"""

from __future__ import annotations

from collections.abc import Mapping
import math
import re
from typing import Any, Callable

from eats_content.recipes.errors import RecipeValidationError, ValidationIssue
from eats_content.recipes.models import (
    DEFAULT_DIFFICULTY,
    DIFFICULTIES,
    MAX_STEP_MINUTES,
    SLUG_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    IngredientLine,
    IngredientSection,
    NutritionFacts,
    Step,
    ValidatedRecipe,
)
from eats_content.recipes.text import clean_inline, clean_multiline

DESCRIPTION_MAX_LENGTH = 5000
LABEL_MAX_LENGTH = 120
LINE_MAX_LENGTH = 500
STEP_MAX_LENGTH = 4000
MAX_SERVINGS = 1000
MAX_LIST_ITEMS = 100
_MAX_DIGITS = 18

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_ISO_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$",
    re.IGNORECASE,
)
_MACRO_FIELDS = (
    ("protein", "protein"),
    ("carbohydrates", "carbohydrates"),
    ("fat", "fat"),
    ("fiber", "fiber"),
    ("sugar", "sugar"),
    ("sodium", "sodium"),
)


def _child(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _item(path: str, index: int) -> str:
    return f"{path}[{index}]"


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


class _IssueLog:
    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add(self, path: str, code: str, message: str) -> None:
        self.issues.append(ValidationIssue(path=path, code=code, message=message))

    def type_error(self, path: str, expected: str, value: Any) -> None:
        self.add(path, "type", f"must be {expected}, got {_describe(value)}")


class _NotCoercible(ValueError):
    pass


def _parse_digits(text: str) -> int:
    digits = text.lstrip("+-").lstrip("0")
    if len(digits) > _MAX_DIGITS:
        raise _NotCoercible(f"is too large, got {len(digits)} digits")
    return int(text)


def _iso_duration_minutes(text: str) -> int | None:
    match = _ISO_DURATION_RE.match(text)
    if match is None or text.upper() in {"P", "PT"}:
        return None
    parts = {key: _parse_digits(value) for key, value in match.groupdict().items() if value is not None}
    seconds = (
        parts.get("days", 0) * 86400
        + parts.get("hours", 0) * 3600
        + parts.get("minutes", 0) * 60
        + parts.get("seconds", 0)
    )
    if seconds % 60:
        raise _NotCoercible("is not a whole number of minutes")
    return seconds // 60


def _coerce_int(value: Any, *, allow_duration: bool) -> int:
    if isinstance(value, bool):
        raise _NotCoercible("must be an integer, got boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise _NotCoercible(f"must be a whole number, got {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_RE.match(text):
            return _parse_digits(text)
        if _NUMBER_RE.match(text):
            return _coerce_int(float(text), allow_duration=False)
        if allow_duration:
            minutes = _iso_duration_minutes(text)
            if minutes is not None:
                return minutes
        raise _NotCoercible(f"must be an integer, got {value!r}")
    raise _NotCoercible(f"must be an integer, got {_describe(value)}")


def _coerce_number(value: Any) -> float:
    if isinstance(value, bool):
        raise _NotCoercible("must be a number, got boolean")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError as exc:
            raise _NotCoercible("must be a finite number") from exc
    elif isinstance(value, str) and _NUMBER_RE.match(value.strip()):
        number = float(value.strip())
    elif isinstance(value, str):
        raise _NotCoercible(f"must be a number, got {value!r}")
    else:
        raise _NotCoercible(f"must be a number, got {_describe(value)}")
    if not math.isfinite(number):
        raise _NotCoercible("must be a finite number")
    return number


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class RecipeValidator:
    """Validate an intermediate payload into a ``ValidatedRecipe``."""

    def __init__(self, *, title_max_length: int = TITLE_MAX_LENGTH) -> None:
        if title_max_length < 1:
            raise ValueError("title_max_length must be >= 1")
        self._title_max_length = title_max_length

    def validate(self, payload: Any) -> ValidatedRecipe:
        """Return validated fields or raise ``RecipeValidationError`` with every issue."""

        log = _IssueLog()
        if not isinstance(payload, Mapping):
            log.type_error("$", "an object", payload)
            raise RecipeValidationError(tuple(log.issues))

        title = self._text(payload.get("title"), "title", log, required=True, max_length=self._title_max_length)
        fields = ValidatedRecipe(
            title=title or "",
            id=self._identifier(payload.get("id"), log),
            slug=self._slug(payload.get("slug"), log),
            description=self._text(
                payload.get("description"),
                "description",
                log,
                max_length=DESCRIPTION_MAX_LENGTH,
                multiline=True,
            ),
            prep_minutes=self._integer(payload.get("prepTime"), "prepTime", log, 0, MAX_STEP_MINUTES, duration=True),
            cook_minutes=self._integer(payload.get("cookTime"), "cookTime", log, 0, MAX_STEP_MINUTES, duration=True),
            servings=self._integer(payload.get("servings"), "servings", log, 1, MAX_SERVINGS),
            yield_text=self._text(payload.get("yield"), "yield", log, max_length=LABEL_MAX_LENGTH),
            difficulty=self._difficulty(payload.get("difficulty"), log),
            ingredient_sections=self._ingredient_sections(payload.get("ingredientSections"), log),
            steps=self._steps(payload.get("steps"), log),
            nutrition=self._nutrition(payload.get("nutrition"), log),
            equipment=self._string_list(payload.get("equipment"), "equipment", log),
            tags=self._string_list(payload.get("tags"), "tags", log),
            keywords=self._string_list(payload.get("keywords"), "keywords", log, split_commas=True),
            author=self._text(payload.get("author"), "author", log, max_length=LABEL_MAX_LENGTH),
        )

        if log.issues:
            raise RecipeValidationError(tuple(log.issues))
        return fields

    # -- scalar fields -------------------------------------------------------

    def _text(
        self,
        value: Any,
        path: str,
        log: _IssueLog,
        *,
        required: bool = False,
        max_length: int,
        multiline: bool = False,
    ) -> str | None:
        if value is None:
            if required:
                log.add(path, "required", "is required")
            return None
        if not isinstance(value, str):
            log.type_error(path, "a string", value)
            return None

        cleaned = clean_multiline(value) if multiline else clean_inline(value)
        if not cleaned:
            if required:
                log.add(path, "empty", "must not be empty")
            return None
        if len(cleaned) > max_length:
            log.add(path, "length", f"must be at most {max_length} characters, got {len(cleaned)}")
        return cleaned

    def _identifier(self, value: Any, log: _IssueLog) -> str | None:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return self._text(value, "id", log, max_length=LABEL_MAX_LENGTH)

    def _slug(self, value: Any, log: _IssueLog) -> str | None:
        if _is_blank(value):
            return None
        if not isinstance(value, str):
            log.type_error("slug", "a string", value)
            return None
        slug = value.strip()
        if len(slug) > SLUG_MAX_LENGTH:
            log.add("slug", "length", f"must be at most {SLUG_MAX_LENGTH} characters, got {len(slug)}")
        elif not _SLUG_RE.match(slug):
            log.add("slug", "format", "must contain only lowercase letters, digits and single dashes")
        return slug

    def _integer(
        self,
        value: Any,
        path: str,
        log: _IssueLog,
        minimum: int,
        maximum: int,
        *,
        duration: bool = False,
    ) -> int | None:
        if _is_blank(value):
            return None
        try:
            number = _coerce_int(value, allow_duration=duration)
        except _NotCoercible as exc:
            log.add(path, "type", str(exc))
            return None
        if not minimum <= number <= maximum:
            log.add(path, "range", f"must be between {minimum} and {maximum}, got {number}")
            return None
        return number

    def _difficulty(self, value: Any, log: _IssueLog) -> str:
        if value is None:
            return DEFAULT_DIFFICULTY
        if not isinstance(value, str):
            log.type_error("difficulty", "a string", value)
            return DEFAULT_DIFFICULTY
        normalized = value.strip().casefold()
        if normalized not in DIFFICULTIES:
            log.add("difficulty", "choice", f"must be one of {', '.join(DIFFICULTIES)}, got {value!r}")
            return DEFAULT_DIFFICULTY
        return normalized

    def _flag(self, value: Any, path: str, log: _IssueLog) -> bool:
        if value is None:
            return False
        if not isinstance(value, bool):
            log.type_error(path, "a boolean", value)
            return False
        return value

    # -- collections ---------------------------------------------------------

    def _required_list(self, value: Any, path: str, log: _IssueLog, noun: str) -> list[Any] | None:
        if value is None:
            log.add(path, "required", "is required")
            return None
        if not isinstance(value, (list, tuple)):
            log.type_error(path, "an array", value)
            return None
        if not value:
            log.add(path, "empty", f"must contain at least one {noun}")
            return None
        return list(value)

    def _each(
        self,
        values: list[Any],
        path: str,
        parse: Callable[[Any, str], Any],
    ) -> tuple[Any, ...]:
        parsed = (parse(value, _item(path, index)) for index, value in enumerate(values))
        return tuple(item for item in parsed if item is not None)

    def _ingredient_sections(self, value: Any, log: _IssueLog) -> tuple[IngredientSection, ...]:
        sections = self._required_list(value, "ingredientSections", log, "ingredient section")
        if sections is None:
            return ()

        def parse_section(raw: Any, path: str) -> IngredientSection | None:
            if not isinstance(raw, Mapping):
                log.type_error(path, "an object", raw)
                return None
            title = self._text(raw.get("sectionTitle"), _child(path, "sectionTitle"), log, max_length=LABEL_MAX_LENGTH)
            items_path = _child(path, "items")
            items = self._required_list(raw.get("items"), items_path, log, "ingredient")
            if items is None:
                return None
            return IngredientSection(items=self._each(items, items_path, parse_line), title=title)

        def parse_line(raw: Any, path: str) -> IngredientLine | None:
            if isinstance(raw, str):
                raw = {"text": raw}
            if not isinstance(raw, Mapping):
                log.type_error(path, "an object or string", raw)
                return None
            text = self._text(raw.get("text"), _child(path, "text"), log, required=True, max_length=LINE_MAX_LENGTH)
            optional = self._flag(raw.get("optional"), _child(path, "optional"), log)
            return IngredientLine(text=text, optional=optional) if text else None

        return self._each(sections, "ingredientSections", parse_section)

    def _steps(self, value: Any, log: _IssueLog) -> tuple[Step, ...]:
        steps = self._required_list(value, "steps", log, "step")
        if steps is None:
            return ()

        def parse_step(raw: Any, path: str) -> Step | None:
            if isinstance(raw, str):
                raw = {"instruction": raw}
            if not isinstance(raw, Mapping):
                log.type_error(path, "an object or string", raw)
                return None
            instruction = self._text(
                raw.get("instruction"),
                _child(path, "instruction"),
                log,
                required=True,
                max_length=STEP_MAX_LENGTH,
                multiline=True,
            )
            tip = self._text(raw.get("tip"), _child(path, "tip"), log, max_length=LINE_MAX_LENGTH, multiline=True)
            return Step(instruction=instruction, tip=tip) if instruction else None

        return self._each(steps, "steps", parse_step)

    def _nutrition(self, value: Any, log: _IssueLog) -> NutritionFacts | None:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            log.type_error("nutrition", "an object", value)
            return None

        calories = self._integer(value.get("calories"), "nutrition.calories", log, 0, 100_000)
        macros: dict[str, float | None] = {}
        for key, attribute in _MACRO_FIELDS:
            macros[attribute] = self._non_negative(value.get(key), f"nutrition.{key}", log)
        serving_size = self._text(
            value.get("servingSize"),
            "nutrition.servingSize",
            log,
            max_length=LABEL_MAX_LENGTH,
        )

        facts = NutritionFacts(calories=calories, serving_size=serving_size, **macros)
        if facts == NutritionFacts():
            return None
        return facts

    def _non_negative(self, value: Any, path: str, log: _IssueLog) -> float | None:
        if _is_blank(value):
            return None
        try:
            number = _coerce_number(value)
        except _NotCoercible as exc:
            log.add(path, "type", str(exc))
            return None
        if number < 0:
            log.add(path, "range", f"must not be negative, got {number:g}")
            return None
        return number

    def _string_list(
        self,
        value: Any,
        path: str,
        log: _IssueLog,
        *,
        split_commas: bool = False,
    ) -> tuple[str, ...]:
        if value is None:
            return ()
        if split_commas and isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            log.type_error(path, "an array of strings", value)
            return ()
        if len(value) > MAX_LIST_ITEMS:
            log.add(path, "length", f"must contain at most {MAX_LIST_ITEMS} items, got {len(value)}")
            return ()

        items: list[str] = []
        for index, raw in enumerate(value):
            if not isinstance(raw, str):
                log.type_error(_item(path, index), "a string", raw)
                continue
            cleaned = clean_inline(raw)
            if not cleaned:
                continue
            if len(cleaned) > LABEL_MAX_LENGTH:
                log.add(_item(path, index), "length", f"must be at most {LABEL_MAX_LENGTH} characters")
                continue
            items.append(cleaned)
        return tuple(items)
