"""Exact-phrase lookups against the Google Custom Search JSON API."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from ..errors import ExternalLookupFailure

logger = logging.getLogger("textlab.search")

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


class PhraseSearcher(Protocol):
    """Anything that can resolve an exact phrase to the first matching URL."""

    async def find_first_match_url(self, exact_phrase: str) -> Optional[str]:
        ...


class GoogleSearchClient:
    """Resolve phrases to URLs, treating every failure as "no match"."""

    def __init__(
        self,
        api_key: Optional[str],
        search_engine_id: Optional[str],
        *,
        base_url: str = GOOGLE_SEARCH_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.search_engine_id = search_engine_id
        self.base_url = base_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.search_engine_id)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def find_first_match_url(self, exact_phrase: str) -> Optional[str]:
        """Return the first result link for ``exact_phrase`` or ``None``."""

        if not self.configured:
            logger.warning("Google search credentials are not configured; skipping lookup")
            return None

        params = {
            "key": self.api_key,
            "cx": self.search_engine_id,
            "q": f'"{exact_phrase}"',
        }
        try:
            response = await self._get_client().get(self.base_url, params=params, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.error("Google search request failed for phrase %r: %s", exact_phrase, exc, exc_info=True)
            return None

        if not response.is_success:
            logger.warning(
                "Google search returned non-success status %s for phrase %r",
                response.status_code,
                exact_phrase,
            )
            return None

        try:
            return _first_link(response)
        except ExternalLookupFailure as exc:
            logger.error("Unreadable Google search response for phrase %r: %s", exact_phrase, exc)
            return None


def _first_link(response: httpx.Response) -> Optional[str]:
    """Pull ``items[0].link`` out of a search response body."""

    try:
        data = response.json()
    except ValueError as exc:
        raise ExternalLookupFailure(f"invalid JSON body: {exc}") from exc
    if not isinstance(data, dict):
        raise ExternalLookupFailure("response body is not an object")

    items = data.get("items") or []
    if not isinstance(items, list):
        raise ExternalLookupFailure("'items' is not a list")
    if not items:
        return None
    first = items[0]
    link = first.get("link") if isinstance(first, dict) else None
    if link is not None and not isinstance(link, str):
        raise ExternalLookupFailure("'link' is not a string")
    return link or None


def build_search_client_from_settings(settings, client: Optional[httpx.AsyncClient] = None) -> GoogleSearchClient:
    return GoogleSearchClient(
        api_key=settings.google_search_api_key,
        search_engine_id=settings.google_search_engine_id,
        base_url=settings.google_search_base_url,
        timeout=settings.search_timeout_seconds,
        client=client,
    )
