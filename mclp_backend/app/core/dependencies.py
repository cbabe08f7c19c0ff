"""
Caller identification dependencies for FastAPI.

Credentials are issued elsewhere; every protected route only needs the
caller id carried by the bearer token. The id is passed explicitly into
repositories and services, never stored on shared state.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from mclp_backend.app.core.exceptions import AuthenticationError
from mclp_backend.app.core.jwt import decode_access_token

# HTTP Bearer security scheme; missing headers are reported as 401 below
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    FastAPI dependency that authenticates the request.

    Returns:
        Decoded token payload containing the caller identity

    Raises:
        AuthenticationError: 401 if the token is missing, invalid or expired,
            or carries no caller identity
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    if not (payload.get("user_id") or payload.get("sub")):
        raise AuthenticationError("Invalid token payload")

    return payload


async def get_caller_id(current_user: dict = Depends(get_current_user)) -> str:
    """Resolve the opaque caller id used as ``owner_id`` on every entity."""
    return str(current_user.get("user_id") or current_user["sub"])
