"""Facade that turns raw content-store documents into conversion outcomes."""

from __future__ import annotations

from collections.abc import Iterable
import logging
import time
from typing import Any, Callable

from eats_content.config import AdapterSettings
from eats_content.recipes.builder import RecipeBuilder, VariantMetadata
from eats_content.recipes.classifier import (
    classify,
    read_discriminant_key,
    read_document_id,
    read_variant_tag,
)
from eats_content.recipes.errors import (
    BlobDecodeError,
    DecodeErrorKind,
    FieldExtractionError,
    RecipeValidationError,
)
from eats_content.recipes.models import Variant
from eats_content.recipes.outcome import ConversionOutcome, ErrorKind, Failure, Success
from eats_content.recipes.validator import RecipeValidator
from eats_content.recipes.variants import BlobDecoder, FieldExtractor, PayloadSource
from eats_content.telemetry.recorder import (
    OUTCOME_FAILURE,
    OUTCOME_SUCCESS,
    TelemetryEvent,
    TelemetryRecorder,
)

LOGGER = logging.getLogger(__name__)

_DECODE_KINDS = {
    DecodeErrorKind.MALFORMED: ErrorKind.DECODE_MALFORMED,
    DecodeErrorKind.WRONG_SHAPE: ErrorKind.DECODE_WRONG_SHAPE,
}


class RecipeAdapter:
    """Classify, extract, validate and build one document at a time.

    ``adapt_to_recipe`` never raises: every problem, expected or not, comes back
    as a ``Failure`` and every attempt is recorded in telemetry.
    """

    def __init__(
        self,
        recorder: TelemetryRecorder | None = None,
        *,
        validator: RecipeValidator | None = None,
        builder: RecipeBuilder | None = None,
        clock: Callable[[], float] = time.perf_counter,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._recorder = recorder if recorder is not None else TelemetryRecorder()
        self._validator = validator if validator is not None else RecipeValidator()
        self._builder = builder if builder is not None else RecipeBuilder()
        self._clock = clock
        self._wall_clock = wall_clock
        self._sources: dict[Variant, PayloadSource] = {
            Variant.STRUCTURED: FieldExtractor(),
            Variant.BLOB: BlobDecoder(),
        }

    @property
    def recorder(self) -> TelemetryRecorder:
        return self._recorder

    def adapt_to_recipe(self, document: Any) -> ConversionOutcome:
        started = self._clock()
        variant = Variant.UNKNOWN
        try:
            variant = classify(document)
            outcome = self._convert(document, variant)
        except Exception as exc:
            LOGGER.exception("Unexpected error converting document %s", read_document_id(document))
            outcome = Failure(ErrorKind.INTERNAL_ERROR, f"Unexpected {type(exc).__name__} during conversion: {exc}")

        if isinstance(outcome, Failure) and outcome.kind is not ErrorKind.INTERNAL_ERROR:
            LOGGER.warning(
                "Recipe conversion failed (document=%s, variant=%s, kind=%s): %s",
                read_document_id(document),
                variant.value,
                outcome.kind.value,
                outcome.message,
            )
        self._record(document, variant, outcome, started)
        return outcome

    def adapt_many(self, documents: Iterable[Any]) -> list[ConversionOutcome]:
        """Convert documents independently; one failure never stops the batch."""

        return [self.adapt_to_recipe(document) for document in documents]

    def _convert(self, document: Any, variant: Variant) -> ConversionOutcome:
        if variant is Variant.UNKNOWN:
            tag = read_variant_tag(document)
            if tag is None:
                message = "Document has no recognisable variant tag"
            else:
                message = f"Unrecognised variant tag {tag!r}"
            return Failure(ErrorKind.UNKNOWN_VARIANT, message, path=read_discriminant_key(document))

        source = self._sources[variant]
        try:
            extraction = source.extract(document)
        except BlobDecodeError as exc:
            return Failure(_DECODE_KINDS[exc.kind], str(exc), path=exc.path)
        except FieldExtractionError as exc:
            return Failure(ErrorKind.EXTRACT_ERROR, exc.message, path=exc.path)

        try:
            fields = self._validator.validate(extraction.payload)
            recipe = self._builder.build(
                fields,
                VariantMetadata(variant=variant, used_legacy_fields=extraction.used_legacy_fields),
            )
        except RecipeValidationError as exc:
            first_path = exc.issues[0].path if exc.issues else None
            return Failure(ErrorKind.VALIDATION_FAILED, str(exc), path=first_path, issues=exc.issues)
        return Success(recipe)

    def _record(self, document: Any, variant: Variant, outcome: ConversionOutcome, started: float) -> None:
        try:
            if isinstance(outcome, Success):
                document_id = outcome.recipe.id or read_document_id(document)
                status, error_kind = OUTCOME_SUCCESS, None
            else:
                document_id = read_document_id(document)
                status, error_kind = OUTCOME_FAILURE, outcome.kind.value
            event = TelemetryEvent(
                timestamp=self._wall_clock(),
                document_id=document_id,
                variant=variant.value,
                outcome=status,
                duration_ms=(self._clock() - started) * 1000.0,
                error_kind=error_kind,
            )
        except Exception:
            LOGGER.error("Failed to build telemetry event", exc_info=True)
            return
        self._recorder.record(event)


def build_adapter(settings: AdapterSettings | None = None) -> RecipeAdapter:
    """Construct an adapter with its own telemetry recorder from settings."""

    resolved = settings or AdapterSettings()
    return RecipeAdapter(
        TelemetryRecorder(capacity=resolved.telemetry_capacity),
        validator=RecipeValidator(title_max_length=resolved.title_max_length),
    )
