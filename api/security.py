"""
Security utilities for API authentication.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

# HTTP Bearer token scheme
security_scheme = HTTPBearer(
    scheme_name="API Token",
    description="Enter your API token",
    auto_error=False
)


async def get_bearer_credential(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> Optional[str]:
    """
    FastAPI dependency returning the raw bearer credential, if any.

    Verification is left to the search flow so that an unauthenticated
    request is answered in the same error format as every other failure.
    """
    if not credentials:
        return None
    return credentials.credentials


async def get_current_user(request: Request, credential: Optional[str] = Depends(get_bearer_credential)) -> str:
    """
    FastAPI dependency resolving the caller to a user ID.

    Raises:
        UnauthorizedError: If the credential is missing or invalid
    """
    return await request.app.state.authenticator.authenticate(credential)


def require_auth():
    """
    Dependency requiring an authenticated user.

    Returns:
        Dependency function for FastAPI
    """
    return Depends(get_current_user)
