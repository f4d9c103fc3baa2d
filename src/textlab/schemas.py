"""Pydantic schema definitions."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AnalyzeTextRequest(BaseModel):
    text: Optional[str] = None


class ExtractShinglesRequest(BaseModel):
    text: Optional[str] = None
    k: int


class DetectPlagiarismRequest(BaseModel):
    text: Optional[str] = None
    shingle_size: Optional[int] = Field(default=None, alias="shingleSize")
    sample_step: Optional[int] = Field(default=None, alias="sampleStep")

    class Config:
        populate_by_name = True


class StatsResponse(BaseModel):
    """Shared shape for word and shingle statistics."""

    total: int
    counts: Dict[str, int]
    frequencies: Dict[str, float]

    class Config:
        from_attributes = True


class FileStatsResponse(StatsResponse):
    file_name: str = Field(alias="fileName")

    class Config:
        populate_by_name = True


class SourceMatch(BaseModel):
    matched_shingles: List[str] = Field(alias="matchedShingles")
    url: str

    class Config:
        populate_by_name = True


class PlagiarismResponse(BaseModel):
    score: float
    potential_sources: List[SourceMatch] = Field(alias="potentialSources")

    class Config:
        populate_by_name = True


class FilePlagiarismResponse(PlagiarismResponse):
    file_name: str = Field(alias="fileName")


class ErrorResponse(BaseModel):
    error: str
