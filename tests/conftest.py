"""
Shared fixtures for the test suite.
"""
import pytest
from fastapi.testclient import TestClient

from config import ServiceConfig
from main import app, configure_services
from services.observability import observability_service
from fakes import ALICE_TOKEN, BOB_TOKEN, FakeCalendar, FakeClock, FakeFetcher


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_calendar():
    return FakeCalendar()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture(params=["memory", "sqlite"])
def service_config(request):
    return ServiceConfig(
        storage_backend=request.param,
        api_tokens={ALICE_TOKEN: "alice", BOB_TOKEN: "bob"},
        daily_search_limit=3,
        upstream_timeout_seconds=1.0,
    )


@pytest.fixture
def client(service_config, fake_fetcher, fake_clock, fake_calendar):
    """Test client wired to each storage backend and a fake caption provider."""
    with TestClient(app) as test_client:
        configure_services(app, service_config, fetcher=fake_fetcher, clock=fake_clock, today=fake_calendar)
        observability_service.reset_metrics()
        yield test_client
