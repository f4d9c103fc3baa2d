"""Unit tests for shingle extraction."""

from __future__ import annotations

import pytest

from src.textlab.analysis.shingles import ShingleExtractor, shingle_stats, shingles
from src.textlab.errors import InvalidArgument


def test_shingles_sliding_window():
    tokens = ["one", "two", "three", "four"]
    assert shingles(tokens, 2) == ["one two", "two three", "three four"]
    assert shingles(tokens, 4) == ["one two three four"]


@pytest.mark.parametrize("k", [0, -5, 3])
def test_shingles_degenerate_window_is_empty(k):
    assert shingles(["one", "two"], k) == []


def test_shingle_stats_counts_and_frequencies():
    stats = shingle_stats("one two three one two", 2)
    assert stats.total == 4
    assert stats.counts == {"one two": 2, "two three": 1, "three one": 1}
    assert stats.frequencies["one two"] == 0.5
    assert stats.frequencies["two three"] == 0.25
    assert stats.frequencies["three one"] == 0.25


@pytest.mark.parametrize("text,k", [("a b c d e f g", 1), ("a b c d e f g", 3), ("a b c d e f g", 7), ("a b", 5)])
def test_shingle_count_law(text, k):
    n = len(text.split())
    expected = n - k + 1 if n >= k else 0
    assert shingle_stats(text, k).total == expected


def test_shingle_stats_normalizes_tokens():
    stats = shingle_stats("Hello, World! hello world", 2)
    assert stats.counts["hello world"] == 2


def test_extractor_returns_stats():
    stats = ShingleExtractor().extract("one two three four", 2)
    assert stats.total == 3
    assert "one two" in stats.counts


def test_extractor_list_keeps_duplicates():
    assert ShingleExtractor().extract_list("a b a b", 2) == ["a b", "b a", "a b"]


def test_extractor_too_few_tokens_is_empty():
    stats = ShingleExtractor().extract("one two", 3)
    assert stats.total == 0
    assert stats.counts == {}
    assert stats.frequencies == {}


@pytest.mark.parametrize("text", [None, "", "   "])
def test_extractor_rejects_blank_text(text):
    with pytest.raises(InvalidArgument, match="Text is required"):
        ShingleExtractor().extract(text, 2)


@pytest.mark.parametrize("k", [0, -1])
def test_extractor_rejects_non_positive_k(k):
    with pytest.raises(InvalidArgument, match="K must be > 0"):
        ShingleExtractor().extract("some text", k)


def test_extractor_rejects_oversized_text():
    with pytest.raises(InvalidArgument, match="Text is too large"):
        ShingleExtractor().extract("a" * 1_000_001, 2)
    with pytest.raises(InvalidArgument, match=r"\(>10 chars\)"):
        ShingleExtractor(max_chars=10).extract_list("one two three", 2)
