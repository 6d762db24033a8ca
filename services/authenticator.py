"""
Bearer credential verification.
"""
import secrets
from typing import Dict, Optional, Protocol

from models import UnauthorizedError
from app_logging import log_with_context


class Authenticator(Protocol):
    """Resolves a bearer credential to a stable user ID."""

    async def authenticate(self, credential: Optional[str]) -> str:
        ...


class StaticTokenAuthenticator:
    """Authenticates against a configured token -> user ID map."""

    def __init__(self, tokens: Dict[str, str]):
        self._tokens = dict(tokens)
        if not self._tokens:
            log_with_context("warning", "No API tokens configured - every request will be rejected")

    async def authenticate(self, credential: Optional[str]) -> str:
        """
        Verify a bearer credential.

        Args:
            credential: Token taken from the Authorization header

        Returns:
            The user ID the token belongs to

        Raises:
            UnauthorizedError: If the credential is missing or unknown
        """
        if not credential:
            raise UnauthorizedError("Unauthorized")

        for token, user_id in self._tokens.items():
            if secrets.compare_digest(token.encode(), credential.encode()):
                return user_id

        log_with_context("warning", f"Invalid API token provided: {credential[:4]}...")
        raise UnauthorizedError("Unauthorized")
