"""
Tests for security functionality.
"""
import pytest

from models import UnauthorizedError
from services.authenticator import StaticTokenAuthenticator
from fakes import ALICE_TOKEN, VIDEO_URL


class TestStaticTokenAuthenticator:
    """Test cases for StaticTokenAuthenticator."""

    def setup_method(self):
        """Set up test fixtures."""
        self.authenticator = StaticTokenAuthenticator({"token-a": "alice", "token-b": "bob"})

    @pytest.mark.asyncio
    async def test_valid_tokens_resolve_to_user(self):
        assert await self.authenticator.authenticate("token-a") == "alice"
        assert await self.authenticator.authenticate("token-b") == "bob"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("credential", [None, "", "token-c", "token-a "])
    async def test_invalid_tokens_are_rejected(self, credential):
        with pytest.raises(UnauthorizedError):
            await self.authenticator.authenticate(credential)

    @pytest.mark.asyncio
    async def test_no_tokens_configured_rejects_everything(self):
        authenticator = StaticTokenAuthenticator({})

        with pytest.raises(UnauthorizedError):
            await authenticator.authenticate("anything")


class TestSecurityEndpoints:
    """Test authentication on the HTTP surface."""

    def test_search_endpoint_without_token(self, client, fake_fetcher):
        """Test that the search endpoint requires authentication."""
        response = client.post("/api/search", json={"videoUrl": VIDEO_URL, "keyword": "hello"})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert fake_fetcher.calls == []

    def test_search_endpoint_with_invalid_token(self, client):
        """Test that the search endpoint rejects invalid tokens."""
        response = client.post(
            "/api/search",
            json={"videoUrl": VIDEO_URL, "keyword": "hello"},
            headers={"Authorization": "Bearer invalid_token"},
        )

        assert response.status_code == 401
        assert "error" in response.json()

    def test_search_endpoint_with_non_bearer_scheme(self, client):
        """Test that other authorization schemes are not accepted."""
        response = client.post(
            "/api/search",
            json={"videoUrl": VIDEO_URL, "keyword": "hello"},
            headers={"Authorization": f"Basic {ALICE_TOKEN}"},
        )

        assert response.status_code == 401

    def test_search_endpoint_with_valid_token(self, client):
        """Test that the search endpoint accepts valid tokens."""
        response = client.post(
            "/api/search",
            json={"videoUrl": VIDEO_URL, "keyword": "hello"},
            headers={"Authorization": f"Bearer {ALICE_TOKEN}"},
        )

        assert response.status_code == 200

    def test_usage_endpoint_requires_token(self, client):
        """Test that the usage endpoint requires authentication."""
        response = client.get("/api/usage")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_health_endpoint_no_auth_required(self, client):
        """Test that health endpoint doesn't require authentication."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
