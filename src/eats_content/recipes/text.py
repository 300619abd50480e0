"""Text cleanup helpers applied to every string field of a recipe."""

from __future__ import annotations

import re
import unicodedata

from eats_content.recipes.models import SLUG_MAX_LENGTH

_WHITESPACE_RE = re.compile(r"\s+")
_INLINE_SPACE_RE = re.compile("[ \t\f\v\u00a0]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
# C0/C1 control characters except tab, newline and carriage return.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_control_characters(text: str) -> str:
    """Drop control characters, keeping line structure. Markup is left as-is."""

    unified = text.replace("\r\n", "\n").replace("\r", "\n")
    return _CONTROL_RE.sub("", unified)


def clean_inline(text: str) -> str:
    """Single-line field: NFC, no control characters, collapsed whitespace."""

    return normalize_whitespace(strip_control_characters(unicodedata.normalize("NFC", text)))


def clean_multiline(text: str) -> str:
    """Multi-line field: like ``clean_inline`` per line, keeping paragraph breaks."""

    normalized = strip_control_characters(unicodedata.normalize("NFC", text))
    lines = [_INLINE_SPACE_RE.sub(" ", line).strip() for line in normalized.split("\n")]
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Deterministic URL-safe slug. Returns "" when nothing ASCII survives."""

    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _SLUG_SEPARATOR_RE.sub("-", folded.lower()).strip("-")
    if len(slug) <= max_length:
        return slug

    cut = slug[:max_length]
    if slug[max_length] != "-" and "-" in cut:
        cut = cut.rsplit("-", 1)[0]
    return cut.strip("-")
