"""
Basic tests for the FastAPI application.
"""
import pytest
from fastapi.testclient import TestClient

from config import ServiceConfig
from main import app, configure_services
from services.observability import ObservabilityService, observability_service
from services.sqlite_store import SQLiteTranscriptCache, SQLiteUsageLedger
from services.usage_ledger import UsageLedger


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data
    assert data["endpoints"]["search"]["path"] == "/api/search"
    assert data["endpoints"]["search"]["method"] == "POST"


def test_request_id_header(client):
    """Test that every response carries a correlation ID."""
    response = client.get("/health")
    assert response.headers.get("X-Request-ID")


def test_request_id_is_propagated(client):
    """Test that a caller-supplied correlation ID is echoed back."""
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_lifespan_builds_services():
    """Test that startup wires the orchestrator from configuration."""
    with TestClient(app):
        assert isinstance(app.state.ledger, UsageLedger)
        assert app.state.orchestrator.ledger is app.state.ledger
        assert app.state.orchestrator.cache is app.state.cache


def test_sqlite_backend_is_selected():
    """Test that the SQLite backend shares one database for both stores."""
    with TestClient(app):
        configure_services(app, ServiceConfig(storage_backend="sqlite", database_path=":memory:"))

        assert isinstance(app.state.ledger, SQLiteUsageLedger)
        assert isinstance(app.state.cache, SQLiteTranscriptCache)
        assert app.state.database is not None


def test_unknown_backend_is_rejected():
    """Test that a misconfigured backend fails fast."""
    with pytest.raises(ValueError):
        configure_services(app, ServiceConfig(storage_backend="redis"))


def test_metrics_endpoint_uses_shared_service(client):
    """Test that the metrics endpoint reads the module-level observability service."""
    assert isinstance(observability_service, ObservabilityService)
    observability_service.record_search(success=True, processing_time=0.1, cache_hit=False)

    response = client.get("/api/metrics")

    assert response.status_code == 200
    data = response.json()
    assert data["total_requests"] == 1
    assert data["cache"]["misses"] == 1
    assert data["cache"]["entries"] == 0
