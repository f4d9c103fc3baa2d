"""Utility script to analyze a single local text file."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from src.textlab.analysis.frequency import analyze
from src.textlab.analysis.plagiarism import PlagiarismDetector
from src.textlab.analysis.shingles import ShingleExtractor
from src.textlab.config import get_settings
from src.textlab.errors import InvalidArgument
from src.textlab.ingest.files import FileContentLoader
from src.textlab.search.google import build_search_client_from_settings


async def check_once(path: Path, mode: str, shingle_size: int, sample_step: int) -> dict:
    settings = get_settings()
    loader = FileContentLoader(settings.allowed_file_extensions, settings.max_file_bytes)
    loaded = loader.read(path.name, path.read_bytes())
    extractor = ShingleExtractor(max_chars=settings.max_text_chars)

    if mode == "words":
        stats = analyze(loaded.text)
        return {"total": stats.total, "counts": stats.counts, "frequencies": stats.frequencies}
    if mode == "shingles":
        stats = extractor.extract(loaded.text, shingle_size)
        return {"total": stats.total, "counts": stats.counts, "frequencies": stats.frequencies}

    client = build_search_client_from_settings(settings)
    try:
        detector = PlagiarismDetector(client, extractor=extractor, max_concurrency=settings.search_max_concurrency)
        result = await detector.detect(loaded.text, shingle_size, sample_step)
    finally:
        await client.aclose()
    return {
        "score": result.score,
        "potentialSources": [
            {"matchedShingles": source.matched_shingles, "url": source.url}
            for source in result.potential_sources
        ],
    }


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Analyze one text file and print the JSON result")
    parser.add_argument("path", type=Path, help="Path to a .txt or .log file")
    parser.add_argument("--mode", choices=("words", "shingles", "plagiarism"), default="words")
    parser.add_argument("--shingle-size", type=int, default=settings.default_shingle_size)
    parser.add_argument("--sample-step", type=int, default=settings.default_sample_step)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    try:
        output = asyncio.run(check_once(args.path, args.mode, args.shingle_size, args.sample_step))
    except InvalidArgument as exc:
        raise SystemExit(f"error: {exc}") from exc
    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
