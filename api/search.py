"""
Keyword search API endpoints.
"""
import time
from typing import Optional

from fastapi import APIRouter, Depends, Request

from models import SearchRequest, SearchResponse, ErrorResponse, UsageResponse, SearchError
from app_logging import log_with_context
from services.observability import observability_service
from services.orchestrator import KeywordSearchOrchestrator
from .security import get_bearer_credential, require_auth

router = APIRouter(prefix="/api", tags=["search"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid video URL or keyword, or caption provider failure"},
    401: {"model": ErrorResponse, "description": "Missing or invalid credential"},
    429: {"model": ErrorResponse, "description": "Daily search limit reached"},
    500: {"model": ErrorResponse, "description": "Internal or storage failure"},
}


def get_orchestrator(request: Request) -> KeywordSearchOrchestrator:
    """Dependency returning the orchestrator built at startup."""
    return request.app.state.orchestrator


@router.post("/search", response_model=SearchResponse, responses=ERROR_RESPONSES)
async def search_keyword(
    body: SearchRequest,
    credential: Optional[str] = Depends(get_bearer_credential),
    orchestrator: KeywordSearchOrchestrator = Depends(get_orchestrator),
):
    """
    Find the timestamps in a video's captions where a keyword appears.

    Each user gets a fixed number of successful searches per day; failed
    searches are not charged.
    """
    start_time = time.time()

    try:
        result = await orchestrator.search(credential, body.video_url, body.keyword)
    except SearchError as e:
        observability_service.record_search(
            success=False,
            processing_time=time.time() - start_time,
            error_code=e.code,
        )
        raise
    except Exception:
        observability_service.record_search(
            success=False,
            processing_time=time.time() - start_time,
            error_code="INTERNAL_ERROR",
        )
        raise

    observability_service.record_search(
        success=True,
        processing_time=time.time() - start_time,
        cache_hit=result.cache_hit,
    )
    return SearchResponse(timestamps=result.hits)


@router.get("/usage", response_model=UsageResponse, responses=ERROR_RESPONSES)
async def get_usage(request: Request, user_id: str = require_auth()):
    """Daily search usage of the authenticated user."""
    orchestrator = request.app.state.orchestrator
    limit = orchestrator.daily_limit
    today = orchestrator.today()
    record = orchestrator.ledger.get_record(user_id)

    count = record.count if record and record.reset_date == today else 0
    log_with_context("info", f"Usage requested by {user_id}: {count}/{limit}")

    return UsageResponse(
        user_id=user_id,
        count=count,
        limit=limit,
        remaining=max(limit - count, 0),
        reset_date=today,
    )
