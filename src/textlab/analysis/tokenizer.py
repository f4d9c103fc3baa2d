"""Unicode-aware word tokenizer."""

from __future__ import annotations

import unicodedata
from typing import List, Optional


# Punctuation kept inside tokens so that handles like "c#" or "@user" survive.
PRESERVED_PUNCTUATION = frozenset({"#", "@"})


def _is_separator(char: str) -> bool:
    return unicodedata.category(char).startswith("P") and char not in PRESERVED_PUNCTUATION


def normalize_text(value: str) -> str:
    """Compose, lower-case and replace punctuation with spaces."""

    value = unicodedata.normalize("NFC", value)
    return "".join(" " if _is_separator(char) else char.lower() for char in value)


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into normalized tokens.

    ``None`` or blank input yields an empty list. Runs of punctuation and
    whitespace collapse into a single boundary, so no empty tokens are
    produced.
    """

    if not text or text.isspace():
        return []
    return normalize_text(text).split()
