"""
Monitoring and observability API endpoints.
"""
from fastapi import APIRouter, Request

from app_logging import get_request_id
from services.observability import observability_service

router = APIRouter(prefix="/api", tags=["monitoring"])


@router.get("/metrics")
async def get_metrics(request: Request):
    """
    Get service metrics.

    Returns:
        Search outcome counters, cache hit rate and cache size
    """
    metrics = observability_service.get_metrics()
    metrics["cache"]["entries"] = request.app.state.cache.size()
    metrics["request_id"] = get_request_id()
    return metrics
