from __future__ import annotations

import pytest

from eats_content.recipes.errors import BlobDecodeError, DecodeErrorKind
from eats_content.recipes.variants import BlobDecoder, PayloadSource


def _decode_error(blob: object) -> BlobDecodeError:
    with pytest.raises(BlobDecodeError) as info:
        BlobDecoder().decode(blob)
    return info.value


def test_decoder_matches_payload_source_protocol() -> None:
    assert isinstance(BlobDecoder(), PayloadSource)


def test_decode_returns_object_payload() -> None:
    payload = BlobDecoder().decode('{"title": "Tea", "steps": []}')

    assert payload == {"title": "Tea", "steps": []}


def test_decode_tolerates_trailing_whitespace_and_bom() -> None:
    decoder = BlobDecoder()

    assert decoder.decode('{"title": "Tea"}\n\n  \t\n') == {"title": "Tea"}
    assert decoder.decode('\ufeff{"title": "Tea"}\r\n') == {"title": "Tea"}


def test_truncated_json_is_malformed_with_position() -> None:
    error = _decode_error('{"title": "Tea", "steps": [')

    assert error.kind is DecodeErrorKind.MALFORMED
    assert error.position is not None
    assert error.line == 1
    assert "position=" in str(error)


def test_position_points_at_later_lines() -> None:
    error = _decode_error('{\n  "title": "Tea",\n  "steps": oops\n}')

    assert error.kind is DecodeErrorKind.MALFORMED
    assert error.line == 3


def test_non_object_top_level_is_wrong_shape() -> None:
    for blob in ('["Tea"]', '"Tea"', "42", "null"):
        error = _decode_error(blob)
        assert error.kind is DecodeErrorKind.WRONG_SHAPE


def test_empty_and_non_string_payloads_are_rejected() -> None:
    assert _decode_error("   \n").kind is DecodeErrorKind.MALFORMED
    assert _decode_error({"title": "Tea"}).kind is DecodeErrorKind.WRONG_SHAPE
    assert _decode_error(None).kind is DecodeErrorKind.WRONG_SHAPE


def test_non_standard_constants_are_malformed() -> None:
    error = _decode_error('{"title": "Tea", "prepTime": NaN}')

    assert error.kind is DecodeErrorKind.MALFORMED
    assert "NaN" in error.message


def test_extract_overlays_document_id() -> None:
    extraction = BlobDecoder().extract(
        {"_type": "recipeJson", "_id": "doc-1", "json": '{"id": "inner", "title": "Tea"}'}
    )

    assert extraction.payload["id"] == "doc-1"
    assert extraction.used_legacy_field is False


def test_extract_keeps_payload_id_without_document_id() -> None:
    extraction = BlobDecoder().extract({"_type": "recipeJson", "json": '{"id": "inner"}'})

    assert extraction.payload["id"] == "inner"


def test_extract_without_json_field_is_wrong_shape() -> None:
    with pytest.raises(BlobDecodeError) as info:
        BlobDecoder().extract({"_type": "recipeJson", "body": "{}"})

    assert info.value.kind is DecodeErrorKind.WRONG_SHAPE
    assert info.value.path == "json"
