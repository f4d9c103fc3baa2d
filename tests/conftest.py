"""Pytest fixtures for Textlab tests."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.textlab.config import Settings
from src.textlab.deps import get_search_client
from src.textlab.main import app


class FakeSearcher:
    """In-memory phrase searcher that records every lookup."""

    def __init__(self, results: Optional[dict[str, str]] = None, *, delay: float = 0.0) -> None:
        self.results = dict(results or {})
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def find_first_match_url(self, exact_phrase: str) -> Optional[str]:
        self.calls.append(exact_phrase)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return self.results.get(exact_phrase)
        finally:
            self.in_flight -= 1


@pytest.fixture(scope="function")
def fake_searcher() -> FakeSearcher:
    return FakeSearcher()


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """Provide test-specific settings."""
    return Settings(
        app_env="test",
        log_level="DEBUG",
        google_search_api_key="test-key",
        google_search_engine_id="test-cx",
        max_file_bytes=1024,
    )


@pytest_asyncio.fixture(scope="function")
async def test_client(fake_searcher) -> AsyncIterator[AsyncClient]:
    """Provide an async HTTP client for testing the FastAPI app."""

    app.dependency_overrides[get_search_client] = lambda: fake_searcher
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_search_client, None)


@pytest.fixture(scope="function")
def make_searcher():
    """Factory for searchers preloaded with phrase -> URL answers."""
    return FakeSearcher
