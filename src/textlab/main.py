"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .analysis.frequency import TokenStats, analyze
from .analysis.plagiarism import PlagiarismDetector, PlagiarismResult
from .analysis.shingles import ShingleExtractor
from .config import get_settings
from .deps import close_search_client, get_detector, get_file_loader, get_shingle_extractor
from .errors import InvalidArgument
from .ingest.files import FileContentLoader, LoadedFile
from .schemas import (
    AnalyzeTextRequest,
    DetectPlagiarismRequest,
    ErrorResponse,
    ExtractShinglesRequest,
    FilePlagiarismResponse,
    FileStatsResponse,
    PlagiarismResponse,
    SourceMatch as SourceMatchSchema,
    StatsResponse,
)


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("textlab")

app = FastAPI(title="Textlab Text Analysis API", version="0.1.0")

# Optional CORS support when serving the frontend locally.
if settings.app_env == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

ERROR_RESPONSES = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    ]
    message = "; ".join(problems) or "Invalid request"
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    logger.info("Application shutdown initiated")
    await close_search_client()


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    """Simple health probe endpoint."""

    return {"status": "ok", "env": settings.app_env}


@app.post("/text/analyze", response_model=StatsResponse, responses=ERROR_RESPONSES, tags=["text"])
async def analyze_text(payload: AnalyzeTextRequest) -> StatsResponse:
    """Count word occurrences in the submitted text."""

    text = require_text(payload.text)
    stats = analyze(text)
    logger.info("POST /text/analyze: %d chars, %d tokens, %d unique", len(text), stats.total, len(stats.counts))
    return StatsResponse.model_validate(stats)


@app.post("/text/shingles", response_model=StatsResponse, responses=ERROR_RESPONSES, tags=["text"])
async def extract_shingles(
    payload: ExtractShinglesRequest,
    extractor: ShingleExtractor = Depends(get_shingle_extractor),
) -> StatsResponse:
    """Return shingle statistics for the submitted text."""

    stats = extractor.extract(payload.text, payload.k)
    logger.info("POST /text/shingles: k=%d, %d shingles", payload.k, stats.total)
    return StatsResponse.model_validate(stats)


@app.post("/plagiarism/detect", response_model=PlagiarismResponse, responses=ERROR_RESPONSES, tags=["plagiarism"])
async def detect_plagiarism(
    payload: DetectPlagiarismRequest,
    detector: PlagiarismDetector = Depends(get_detector),
) -> PlagiarismResponse:
    """Search the web for sampled shingles of the submitted text."""

    shingle_size, sample_step = resolve_detection_params(payload.shingle_size, payload.sample_step)
    logger.info("POST /plagiarism/detect: shingleSize=%d, sampleStep=%d", shingle_size, sample_step)
    result = await detector.detect(payload.text, shingle_size, sample_step)
    return build_plagiarism_response(result)


@app.post("/file/analyze", response_model=None, responses=ERROR_RESPONSES, tags=["files"])
async def analyze_file(
    request: Request,
    file: Optional[UploadFile] = File(default=None),
    files: Optional[List[UploadFile]] = File(default=None),
    loader: FileContentLoader = Depends(get_file_loader),
) -> StatsResponse | list[FileStatsResponse]:
    """Count word occurrences in one or more uploaded text files."""

    uploads, wrap = collect_uploads(request, file, files)
    loaded = [await loader.load(upload) for upload in uploads]
    logger.info("POST /file/analyze: %d file(s)", len(loaded))
    if not wrap:
        return StatsResponse.model_validate(analyze(loaded[0].text))
    return [build_file_stats_response(item, analyze(item.text)) for item in loaded]


@app.post("/file/shingles", response_model=None, responses=ERROR_RESPONSES, tags=["files"])
async def extract_file_shingles(
    request: Request,
    k: int = Form(...),
    file: Optional[UploadFile] = File(default=None),
    files: Optional[List[UploadFile]] = File(default=None),
    loader: FileContentLoader = Depends(get_file_loader),
    extractor: ShingleExtractor = Depends(get_shingle_extractor),
) -> StatsResponse | list[FileStatsResponse]:
    """Return shingle statistics for one or more uploaded text files."""

    uploads, wrap = collect_uploads(request, file, files)
    loaded = [await loader.load(upload) for upload in uploads]
    logger.info("POST /file/shingles: %d file(s), k=%d", len(loaded), k)
    if not wrap:
        return StatsResponse.model_validate(extractor.extract(loaded[0].text, k))
    return [build_file_stats_response(item, extractor.extract(item.text, k)) for item in loaded]


@app.post("/plagiarism/detect/file", response_model=None, responses=ERROR_RESPONSES, tags=["plagiarism"])
async def detect_file_plagiarism(
    request: Request,
    shingle_size: Optional[int] = Form(default=None, alias="shingleSize"),
    sample_step: Optional[int] = Form(default=None, alias="sampleStep"),
    file: Optional[UploadFile] = File(default=None),
    files: Optional[List[UploadFile]] = File(default=None),
    loader: FileContentLoader = Depends(get_file_loader),
    detector: PlagiarismDetector = Depends(get_detector),
) -> PlagiarismResponse | list[FilePlagiarismResponse]:
    """Run plagiarism detection on one or more uploaded text files."""

    size, step = resolve_detection_params(shingle_size, sample_step)
    uploads, wrap = collect_uploads(request, file, files)
    loaded = [await loader.load(upload) for upload in uploads]
    logger.info("POST /plagiarism/detect/file: %d file(s), shingleSize=%d, sampleStep=%d", len(loaded), size, step)
    if not wrap:
        return build_plagiarism_response(await detector.detect(loaded[0].text, size, step))

    response: list[FilePlagiarismResponse] = []
    for item in loaded:
        result = await detector.detect(item.text, size, step)
        response.append(
            FilePlagiarismResponse(
                file_name=item.file_name,
                score=result.score,
                potential_sources=build_source_matches(result),
            )
        )
    return response


def require_text(text: Optional[str]) -> str:
    if text is None or not text.strip():
        raise InvalidArgument("Text is required")
    if len(text) > settings.max_text_chars:
        raise InvalidArgument(f"Text is too large (>{settings.max_text_chars} chars)")
    return text


def resolve_detection_params(shingle_size: Optional[int], sample_step: Optional[int]) -> tuple[int, int]:
    if shingle_size is None:
        shingle_size = settings.default_shingle_size
    if sample_step is None:
        sample_step = settings.default_sample_step
    return shingle_size, sample_step


def collect_uploads(
    request: Request,
    file: Optional[UploadFile],
    files: Optional[List[UploadFile]],
) -> tuple[list[UploadFile], bool]:
    """Return submitted uploads and whether responses are wrapped per file."""

    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/form-data"):
        raise InvalidArgument("Expected multipart/form-data")
    if files:
        uploads = ([file] if file is not None else []) + list(files)
        return uploads, True
    if file is None:
        raise InvalidArgument("File is required")
    return [file], False


def build_file_stats_response(item: LoadedFile, stats: TokenStats) -> FileStatsResponse:
    return FileStatsResponse(
        file_name=item.file_name,
        total=stats.total,
        counts=stats.counts,
        frequencies=stats.frequencies,
    )


def build_source_matches(result: PlagiarismResult) -> list[SourceMatchSchema]:
    return [
        SourceMatchSchema(matched_shingles=list(source.matched_shingles), url=source.url)
        for source in result.potential_sources
    ]


def build_plagiarism_response(result: PlagiarismResult) -> PlagiarismResponse:
    return PlagiarismResponse(score=result.score, potential_sources=build_source_matches(result))
