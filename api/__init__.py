"""
API router initialization.
"""
from fastapi import APIRouter
from api.search import router as search_router
from api.monitoring import router as monitoring_router

# Create main API router
router = APIRouter()

# Include sub-routers
router.include_router(search_router)
router.include_router(monitoring_router)
