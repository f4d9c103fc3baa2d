"""Shingle (k-gram) extraction utilities."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..errors import InvalidArgument
from .frequency import TokenStats
from .tokenizer import tokenize

logger = logging.getLogger("textlab.analysis")

DEFAULT_MAX_CHARS = 1_000_000

# Shingle statistics share the token statistics shape.
ShingleStats = TokenStats


def shingles(tokens: Sequence[str], k: int) -> List[str]:
    """Return every k-token window joined by single spaces, in order."""

    if k <= 0 or len(tokens) < k:
        return []
    return [" ".join(tokens[idx : idx + k]) for idx in range(len(tokens) - k + 1)]


def shingle_stats(text: Optional[str], k: int) -> ShingleStats:
    """Aggregate shingle occurrences for ``text`` without validating input."""

    return ShingleStats.from_items(shingles(tokenize(text), k))


class ShingleExtractor:
    """Validate input before extracting shingles from it."""

    def __init__(self, max_chars: int = DEFAULT_MAX_CHARS) -> None:
        self.max_chars = max_chars

    def validate(self, text: Optional[str], k: int) -> None:
        if text is None or not text.strip():
            raise InvalidArgument("Text is required")
        if k <= 0:
            raise InvalidArgument("K must be > 0")
        if len(text) > self.max_chars:
            raise InvalidArgument(f"Text is too large (>{self.max_chars} chars)")

    def extract(self, text: Optional[str], k: int) -> ShingleStats:
        """Return aggregated shingle statistics for ``text``."""

        self.validate(text, k)
        stats = shingle_stats(text, k)
        logger.debug("Extracted %d shingles (%d unique) with k=%d", stats.total, len(stats.counts), k)
        return stats

    def extract_list(self, text: Optional[str], k: int) -> List[str]:
        """Return the ordered list of shingle occurrences for ``text``."""

        self.validate(text, k)
        return shingles(tokenize(text), k)
