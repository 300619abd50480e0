"""Variant classification for raw content-store documents."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from eats_content.recipes.models import Variant

LOGGER = logging.getLogger(__name__)

# `_type` is the store's native discriminant; `variantTag` is accepted when it is absent.
DISCRIMINANT_KEYS = ("_type", "variantTag")
STRUCTURED_TAG = "recipe"
BLOB_TAG = "recipeJson"
STRUCTURED_TAGS = frozenset({STRUCTURED_TAG})
BLOB_TAGS = frozenset({BLOB_TAG})


def _discriminant(document: Any) -> tuple[str | None, Any]:
    if not isinstance(document, Mapping):
        return None, None
    try:
        for key in DISCRIMINANT_KEYS:
            tag = document.get(key)
            if tag is not None:
                return key, tag
    except Exception:
        LOGGER.debug("Could not read discriminant from document", exc_info=True)
    return None, None


def read_variant_tag(document: Any) -> str | None:
    """Return the raw discriminant value, or None when there is no usable tag."""

    _, tag = _discriminant(document)
    return tag.strip() if isinstance(tag, str) else None


def read_discriminant_key(document: Any) -> str:
    """Key the discriminant was read from, or the native key when none is set."""

    key, _ = _discriminant(document)
    return key if key is not None else DISCRIMINANT_KEYS[0]


def classify(document: Any) -> Variant:
    """Select the payload source for a document. Never raises."""

    tag = read_variant_tag(document)
    if tag in STRUCTURED_TAGS:
        return Variant.STRUCTURED
    if tag in BLOB_TAGS:
        return Variant.BLOB
    return Variant.UNKNOWN


def read_document_id(document: Any) -> str | None:
    """Best-effort document identity for logging and telemetry."""

    if not isinstance(document, Mapping):
        return None
    try:
        value = document.get("_id")
    except Exception:
        return None
    return value if isinstance(value, str) and value else None
