"""Error types shared across the analysis pipeline."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when caller-supplied input fails validation."""


class ExternalLookupFailure(RuntimeError):
    """Raised when the phrase-search provider cannot produce a usable answer."""
