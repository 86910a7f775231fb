"""Data models for search and extraction."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for request/response bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchResult(BaseModel):
    """One normalized search hit, in backend relevance order."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str = ""


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Search query text")


class SearchResponse(BaseModel):
    results: List[SearchResult] = Field(default_factory=list)
    cached: Optional[bool] = None  # Only emitted on a cache hit


class ExtractionFound(WireModel):
    """The excerpt was located; `extracted_text` is the window around it."""

    found: Literal[True] = True
    title: str
    url: str
    extracted_text: str


class ExtractionNotFound(WireModel):
    """The page was read but the excerpt was not on it."""

    found: Literal[False] = False
    title: str
    url: str
    full_text: str = Field(default="", max_length=5000)


ExtractionResult = Union[ExtractionFound, ExtractionNotFound]


class ExtractRequest(WireModel):
    user_id: str = Field(..., min_length=1, description="Browser session identity")
    url: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1)
    chars_before: int = Field(default=500, ge=0)
    chars_after: int = Field(default=1000, ge=0)


class BatchItem(WireModel):
    url: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1)
    chars_before: Optional[int] = Field(default=None, ge=0)
    chars_after: Optional[int] = Field(default=None, ge=0)


class BatchExtractRequest(WireModel):
    items: List[BatchItem] = Field(default_factory=list)
    chars_before: int = Field(default=500, ge=0)
    chars_after: int = Field(default=1000, ge=0)


class BatchExtractResponse(WireModel):
    results: List[ExtractionFound] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
    sessions: int = 0


class ErrorResponse(BaseModel):
    error: str
