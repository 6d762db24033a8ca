"""
Pydantic models for request/response schemas, store records and the error taxonomy.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# HTTP schemas
# ---------------------------------------------------------------------------

class SearchRequest(BaseModel):
    """Request body for a keyword search.

    Both fields are optional at the schema level so that missing values are
    reported as a 400 by the search flow instead of a validation error.
    """
    model_config = ConfigDict(populate_by_name=True)

    video_url: Optional[str] = Field(default=None, alias="videoUrl", description="YouTube video URL")
    keyword: Optional[str] = Field(default=None, description="Keyword to look up in the captions")


class KeywordHit(BaseModel):
    """A caption block containing the keyword."""
    timestamp: str = Field(..., description="Start time of the caption block (SRT format)")
    text: str = Field(..., description="Normalised caption text")


class SearchResponse(BaseModel):
    """Response model for a keyword search."""
    timestamps: List[KeywordHit] = Field(default_factory=list, description="Matching caption blocks in document order")


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""
    error: str = Field(..., description="Human-readable error message")


class UsageResponse(BaseModel):
    """Daily usage for the authenticated user."""
    user_id: str
    count: int
    limit: int
    remaining: int
    reset_date: date


# ---------------------------------------------------------------------------
# Internal records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CaptionBlock:
    """A parsed caption block."""
    start_time: str
    text: str


@dataclass
class UsageRecord:
    """Per-user daily usage counter.

    ``pending`` counts reservations that are in flight and neither committed
    nor released yet.
    """
    user_id: str
    count: int
    reset_date: date
    pending: int = 0


@dataclass(frozen=True)
class CacheEntry:
    """A cached caption document."""
    video_id: str
    captions: str
    expires_at: float


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of a quota reservation attempt."""
    allowed: bool
    record: UsageRecord


@dataclass
class SearchResult:
    """Result of a successful search."""
    user_id: str
    video_id: str
    hits: List[KeywordHit]
    cache_hit: bool


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class SearchError(Exception):
    """Base class for errors terminating a search request."""
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(SearchError):
    """Missing or invalid credential."""
    status_code = 401
    code = "UNAUTHORIZED"


class BadRequestError(SearchError):
    """Unparsable video reference or empty keyword."""
    status_code = 400
    code = "BAD_REQUEST"


class QuotaExceededError(SearchError):
    """Daily search limit reached."""
    status_code = 429
    code = "QUOTA_EXCEEDED"

    def __init__(self, limit: int):
        super().__init__(f"Daily search limit ({limit} searches) reached")
        self.limit = limit


class UpstreamError(SearchError):
    """Caption provider failed or timed out."""
    status_code = 400
    code = "UPSTREAM_ERROR"


class TranscriptUnavailableError(UpstreamError):
    """Exception raised when the video has no captions."""
    code = "NO_CAPTIONS"


class StorageError(SearchError):
    """Ledger or cache read/write failure."""
    status_code = 500
    code = "STORAGE_ERROR"
