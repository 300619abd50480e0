from __future__ import annotations

from collections.abc import Mapping

from eats_content.recipes.classifier import classify, read_discriminant_key, read_document_id, read_variant_tag
from eats_content.recipes.models import Variant


class _ExplodingMapping(Mapping):
    def __getitem__(self, key):
        raise RuntimeError("store client bug")

    def __iter__(self):
        return iter(())

    def __len__(self) -> int:
        return 0


def test_classify_recognises_both_variants() -> None:
    assert classify({"_type": "recipe", "title": "Tea"}) is Variant.STRUCTURED
    assert classify({"_type": "recipeJson", "json": "{}"}) is Variant.BLOB


def test_classify_accepts_alternate_discriminant_key() -> None:
    assert classify({"variantTag": "recipeJson"}) is Variant.BLOB
    assert classify({"_type": "recipe", "variantTag": "recipeJson"}) is Variant.STRUCTURED


def test_classify_returns_unknown_for_missing_or_unrecognised_tags() -> None:
    assert classify({"title": "No tag"}) is Variant.UNKNOWN
    assert classify({"_type": "article"}) is Variant.UNKNOWN
    assert classify({"_type": 42}) is Variant.UNKNOWN
    assert classify({"_type": "Recipe"}) is Variant.UNKNOWN


def test_classify_never_raises_on_non_mapping_input() -> None:
    assert classify(None) is Variant.UNKNOWN
    assert classify(["recipe"]) is Variant.UNKNOWN
    assert classify("recipe") is Variant.UNKNOWN
    assert classify(_ExplodingMapping()) is Variant.UNKNOWN


def test_read_helpers_tolerate_whitespace_and_bad_ids() -> None:
    assert read_variant_tag({"_type": "  recipe \n"}) == "recipe"
    assert classify({"_type": " recipeJson "}) is Variant.BLOB
    assert read_document_id({"_id": "abc"}) == "abc"
    assert read_document_id({"_id": 7}) is None
    assert read_document_id(None) is None


def test_discriminant_key_names_the_field_that_was_read() -> None:
    assert read_discriminant_key({"_type": "article", "variantTag": "recipe"}) == "_type"
    assert read_discriminant_key({"variantTag": "article"}) == "variantTag"
    assert read_discriminant_key({"title": "untagged"}) == "_type"
    assert read_discriminant_key(None) == "_type"
