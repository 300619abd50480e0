"""Per-variant payload sources."""

from .base import PayloadExtraction, PayloadSource
from .blob_decoder import BLOB_PAYLOAD_FIELD, BlobDecoder
from .field_extractor import FieldExtractor

__all__ = [
    "BLOB_PAYLOAD_FIELD",
    "BlobDecoder",
    "FieldExtractor",
    "PayloadExtraction",
    "PayloadSource",
]
