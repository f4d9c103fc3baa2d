"""Word-frequency statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .tokenizer import tokenize


@dataclass(slots=True)
class TokenStats:
    """Occurrence counts and relative frequencies keyed by token or shingle."""

    total: int = 0
    counts: dict[str, int] = field(default_factory=dict)
    frequencies: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_items(cls, items: Iterable[str]) -> "TokenStats":
        """Aggregate a sequence of items, keeping first-occurrence key order."""

        counts = dict(Counter(items))
        total = sum(counts.values())
        if total == 0:
            return cls()
        frequencies = {key: count / total for key, count in counts.items()}
        return cls(total=total, counts=counts, frequencies=frequencies)


def analyze(text: Optional[str]) -> TokenStats:
    """Count word occurrences in ``text``. Never raises."""

    return TokenStats.from_items(tokenize(text))
