"""Naive plagiarism detection by sampling shingles and searching for them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..errors import InvalidArgument
from ..search.google import PhraseSearcher
from .shingles import ShingleExtractor

logger = logging.getLogger("textlab.analysis")


@dataclass(slots=True)
class SourceMatch:
    """An external URL together with the sampled shingles it matched."""

    url: str
    matched_shingles: list[str] = field(default_factory=list)


@dataclass(slots=True)
class PlagiarismResult:
    score: float = 0.0
    potential_sources: list[SourceMatch] = field(default_factory=list)


def sample_shingles(unique_shingles: Sequence[str], step: int) -> list[str]:
    """Keep every shingle whose index is a multiple of ``step``."""

    return [shingle for idx, shingle in enumerate(unique_shingles) if idx % step == 0]


def group_matches(pairs: Sequence[tuple[str, Optional[str]]]) -> list[SourceMatch]:
    """Group matched shingles by URL in order of first appearance."""

    sources: dict[str, SourceMatch] = {}
    for shingle, url in pairs:
        if not url:
            continue
        sources.setdefault(url, SourceMatch(url=url)).matched_shingles.append(shingle)
    return list(sources.values())


class PlagiarismDetector:
    """Estimate how much of a text appears verbatim on the web."""

    def __init__(
        self,
        searcher: PhraseSearcher,
        *,
        extractor: Optional[ShingleExtractor] = None,
        max_concurrency: int = 8,
    ) -> None:
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self.searcher = searcher
        self.extractor = extractor or ShingleExtractor()
        self.max_concurrency = max_concurrency

    async def detect(self, text: Optional[str], shingle_size: int, sample_step: int) -> PlagiarismResult:
        """Sample unique shingles, look each one up and score the matches."""

        if shingle_size <= 0:
            raise InvalidArgument("Shingle size must be greater than 0.")
        if sample_step <= 0:
            raise InvalidArgument("Sample step must be greater than 0.")

        stats = self.extractor.extract(text, shingle_size)
        unique_shingles = list(stats.counts)
        if not unique_shingles:
            return PlagiarismResult()

        sampled = sample_shingles(unique_shingles, sample_step)
        if not sampled:
            return PlagiarismResult()

        logger.info(
            "Searching %d of %d unique shingles (size=%d, step=%d)",
            len(sampled),
            len(unique_shingles),
            shingle_size,
            sample_step,
        )
        urls = await self._lookup_all(sampled)
        pairs = list(zip(sampled, urls))

        matched = sum(1 for _, url in pairs if url)
        sources = group_matches(pairs)
        logger.info("Matched %d/%d sampled shingles across %d source(s)", matched, len(sampled), len(sources))
        return PlagiarismResult(score=matched / len(sampled), potential_sources=sources)

    async def _lookup_all(self, phrases: Sequence[str]) -> list[Optional[str]]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def lookup(phrase: str) -> Optional[str]:
            async with semaphore:
                try:
                    return await self.searcher.find_first_match_url(phrase)
                except Exception as exc:
                    logger.warning("Lookup failed for shingle %r: %s", phrase, exc)
                    return None

        return list(await asyncio.gather(*(lookup(phrase) for phrase in phrases)))
