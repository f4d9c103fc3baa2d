"""FastAPI dependencies."""

from typing import Optional

from fastapi import Depends

from .analysis.plagiarism import PlagiarismDetector
from .analysis.shingles import ShingleExtractor
from .config import get_settings
from .ingest.files import FileContentLoader
from .search.google import GoogleSearchClient, PhraseSearcher, build_search_client_from_settings


_search_client: Optional[GoogleSearchClient] = None


def get_search_client() -> PhraseSearcher:
    """Return the process-wide phrase search client."""

    global _search_client
    if _search_client is None:
        _search_client = build_search_client_from_settings(get_settings())
    return _search_client


async def close_search_client() -> None:
    global _search_client
    if _search_client is not None:
        await _search_client.aclose()
        _search_client = None


def get_shingle_extractor() -> ShingleExtractor:
    return ShingleExtractor(max_chars=get_settings().max_text_chars)


def get_file_loader() -> FileContentLoader:
    settings = get_settings()
    return FileContentLoader(
        allowed_extensions=settings.allowed_file_extensions,
        max_bytes=settings.max_file_bytes,
    )


def get_detector(
    searcher: PhraseSearcher = Depends(get_search_client),
    extractor: ShingleExtractor = Depends(get_shingle_extractor),
) -> PlagiarismDetector:
    return PlagiarismDetector(
        searcher,
        extractor=extractor,
        max_concurrency=get_settings().search_max_concurrency,
    )
