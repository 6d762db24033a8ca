"""
FastAPI main application.
"""
import logging
import time
from contextlib import asynccontextmanager
from datetime import date
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import config, ServiceConfig
from app_logging import setup_logging, set_request_id, get_request_id, log_with_context, redact_secrets
from models import SearchError, StorageError
from api import router
from services.authenticator import StaticTokenAuthenticator
from services.cache import TranscriptCache
from services.orchestrator import KeywordSearchOrchestrator
from services.sqlite_store import SQLiteDatabase, SQLiteTranscriptCache, SQLiteUsageLedger
from services.transcript_fetcher import TranscriptFetcher
from services.usage_ledger import UsageLedger
from services.utils import utc_today

# Set up logging
setup_logging(config.log_level)
logger = logging.getLogger(__name__)


def configure_services(
    app: FastAPI,
    service_config: ServiceConfig,
    fetcher: Optional[TranscriptFetcher] = None,
    clock: Callable[[], float] = time.time,
    today: Callable[[], date] = utc_today,
) -> KeywordSearchOrchestrator:
    """Build the stores and the orchestrator and attach them to ``app.state``."""
    database = None
    if service_config.storage_backend == "sqlite":
        database = SQLiteDatabase(service_config.database_path)
        ledger = SQLiteUsageLedger(database)
        cache = SQLiteTranscriptCache(database, clock=clock)
    elif service_config.storage_backend == "memory":
        ledger = UsageLedger()
        cache = TranscriptCache(clock=clock)
    else:
        raise ValueError(f"Unknown storage backend: {service_config.storage_backend}")

    authenticator = StaticTokenAuthenticator(service_config.api_tokens)
    orchestrator = KeywordSearchOrchestrator(
        authenticator=authenticator,
        ledger=ledger,
        cache=cache,
        fetcher=fetcher or TranscriptFetcher(languages=service_config.caption_languages),
        daily_limit=service_config.daily_search_limit,
        cache_ttl_seconds=service_config.cache_ttl_seconds,
        upstream_timeout_seconds=service_config.upstream_timeout_seconds,
        today=today,
    )

    app.state.config = service_config
    app.state.database = database
    app.state.ledger = ledger
    app.state.cache = cache
    app.state.authenticator = authenticator
    app.state.orchestrator = orchestrator
    return orchestrator


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Keyword Search Service")
    logger.info(f"Configuration loaded: {redact_secrets(config.model_dump())}")
    configure_services(app, config)

    yield

    # Shutdown
    if app.state.database is not None:
        app.state.database.close()
    logger.info("Shutting down Keyword Search Service")


# Create FastAPI app
app = FastAPI(
    title="Keyword Search Service",
    description="Find the timestamps where a keyword is spoken in a YouTube video",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(router)


@app.middleware("http")
async def request_correlation_middleware(request: Request, call_next):
    """Middleware to add request correlation ID."""
    request_id = set_request_id(request.headers.get("X-Request-ID"))

    log_with_context("info", f"Request started: {request.method} {request.url.path}")

    try:
        response = await call_next(request)
        log_with_context("info", f"Request completed: {response.status_code}")
        response.headers["X-Request-ID"] = request_id
        return response
    except Exception as e:
        log_with_context("error", f"Request failed: {str(e)}")
        raise


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "keyword-search"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Keyword Search Service",
        "version": "1.0.0",
        "daily_search_limit": config.daily_search_limit,
        "endpoints": {
            "search": {"path": "/api/search", "method": "POST", "authentication": "Bearer Token"},
            "usage": {"path": "/api/usage", "method": "GET", "authentication": "Bearer Token"},
            "metrics": "/api/metrics",
            "health": "/health",
            "docs": "/docs"
        }
    }


@app.exception_handler(SearchError)
async def search_exception_handler(request: Request, exc: SearchError):
    """Map search errors to their status codes."""
    if isinstance(exc, StorageError):
        logger.error(f"Storage failure: {exc.message}", exc_info=exc)
    else:
        log_with_context("info", f"Request rejected ({exc.code}): {exc.message}")

    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as bad requests."""
    log_with_context("info", f"Invalid request body: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid video URL or keyword"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    request_id = get_request_id()
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "request_id": request_id,
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=config.port,
        log_level=config.log_level.lower()
    )
