"""Decoder for documents that carry a whole recipe as JSON text."""

from __future__ import annotations

from collections.abc import Mapping
import json
from typing import Any

from eats_content.recipes.errors import BlobDecodeError, DecodeErrorKind
from eats_content.recipes.variants.base import PayloadExtraction

BLOB_PAYLOAD_FIELD = "json"


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name!r} is not allowed")


class BlobDecoder:
    """Strict JSON decoding that never returns a partial payload."""

    def decode(self, blob: Any) -> dict[str, Any]:
        if isinstance(blob, (bytes, bytearray)):
            try:
                blob = bytes(blob).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise BlobDecodeError(
                    DecodeErrorKind.MALFORMED,
                    "Blob payload is not valid UTF-8",
                    path=BLOB_PAYLOAD_FIELD,
                    position=exc.start,
                ) from exc
        if not isinstance(blob, str):
            raise BlobDecodeError(
                DecodeErrorKind.WRONG_SHAPE,
                f"Blob payload must be JSON text, got {_json_type_name(blob)}",
                path=BLOB_PAYLOAD_FIELD,
            )

        # Leading BOM and surrounding whitespace are incidental, not malformation.
        text = blob.lstrip("\ufeff")
        if not text.strip():
            raise BlobDecodeError(
                DecodeErrorKind.MALFORMED,
                "Blob payload is empty",
                path=BLOB_PAYLOAD_FIELD,
                position=0,
                line=1,
                column=1,
            )

        try:
            value = json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise BlobDecodeError(
                DecodeErrorKind.MALFORMED,
                f"Blob payload is not valid JSON: {exc.msg}",
                path=BLOB_PAYLOAD_FIELD,
                position=exc.pos,
                line=exc.lineno,
                column=exc.colno,
            ) from exc
        except (ValueError, RecursionError) as exc:
            raise BlobDecodeError(
                DecodeErrorKind.MALFORMED,
                f"Blob payload is not valid JSON: {exc}",
                path=BLOB_PAYLOAD_FIELD,
            ) from exc

        if not isinstance(value, dict):
            raise BlobDecodeError(
                DecodeErrorKind.WRONG_SHAPE,
                f"Blob payload must be a JSON object at top level, got {_json_type_name(value)}",
                path=BLOB_PAYLOAD_FIELD,
            )
        return value

    def extract(self, document: Mapping[str, Any]) -> PayloadExtraction:
        if BLOB_PAYLOAD_FIELD not in document:
            raise BlobDecodeError(
                DecodeErrorKind.WRONG_SHAPE,
                f"Blob document has no '{BLOB_PAYLOAD_FIELD}' field",
                path=BLOB_PAYLOAD_FIELD,
            )

        payload = self.decode(document[BLOB_PAYLOAD_FIELD])
        document_id = document.get("_id")
        if isinstance(document_id, str) and document_id:
            payload = {**payload, "id": document_id}
        return PayloadExtraction(payload=payload)
