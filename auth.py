"""
Bearer token verification against Firebase Authentication.
"""
import json
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import status
from fastapi.responses import JSONResponse

from config import Config
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class AuthError(Exception):
    """Token missing, malformed or rejected."""


class PermissionDeniedError(Exception):
    """Token is valid but the caller lacks the required role."""


@dataclass
class CallerIdentity:
    """Verified caller."""
    uid: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


def _parse_role(user: dict) -> Optional[str]:
    """Role lives in the custom claims, serialized as JSON in customAttributes."""
    raw = user.get("customAttributes")
    if not raw:
        return None
    try:
        claims = json.loads(raw)
    except (TypeError, ValueError):
        app_logger.warning(f"Unreadable customAttributes for {user.get('localId')}")
        return None
    return claims.get("role") if isinstance(claims, dict) else None


async def verify_token(token: str) -> CallerIdentity:
    """
    Verify a Firebase ID token and return the caller.

    Args:
        token: Firebase ID token

    Returns:
        CallerIdentity with uid and role

    Raises:
        AuthError: If the token cannot be verified
    """
    if not Config.FIREBASE_WEB_API_KEY:
        raise AuthError("FIREBASE_WEB_API_KEY is not configured")

    client = HTTPClientManager.get_auth_client()
    try:
        response = await client.post(
            Config.FIREBASE_LOOKUP_URL,
            params={"key": Config.FIREBASE_WEB_API_KEY},
            json={"idToken": token}
        )
    except httpx.HTTPError as e:
        raise AuthError(f"Token verification request failed: {e}") from e

    if response.status_code != 200:
        raise AuthError(f"Token rejected (status {response.status_code})")

    try:
        users = response.json().get("users") or []
        user = users[0] if users else {}
        uid = user.get("localId")
    except (ValueError, AttributeError, TypeError, KeyError) as e:
        raise AuthError(f"Unreadable token lookup response: {type(e).__name__}") from e

    if not uid:
        raise AuthError("Token does not belong to a user")

    return CallerIdentity(uid=uid, role=_parse_role(user))


async def get_optional_caller(authorization: Optional[str]) -> Optional[CallerIdentity]:
    """
    Resolve the caller for endpoints where auth is optional.
    Any failure degrades to an anonymous request.
    """
    token = extract_bearer_token(authorization)
    if not token:
        return None

    try:
        return await verify_token(token)
    except AuthError as e:
        app_logger.warning(f"Proceeding anonymously, token verification failed: {e}")
        return None


async def require_admin(authorization: Optional[str]) -> CallerIdentity:
    """
    Resolve the caller and require the admin role.

    Raises:
        AuthError: Missing or invalid token
        PermissionDeniedError: Caller is not an admin
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthError("Missing bearer token")

    caller = await verify_token(token)
    if not caller.is_admin:
        raise PermissionDeniedError(f"Caller {caller.uid} is not an admin")
    return caller


def auth_error_response(error: Exception) -> JSONResponse:
    """Map an auth exception to the 401/403 response body."""
    if isinstance(error, PermissionDeniedError):
        app_logger.warning(f"Forbidden request: {error}")
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"error": "Forbidden"})

    app_logger.warning(f"Unauthorized request: {error}")
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": "Unauthorized"},
        headers={"WWW-Authenticate": "Bearer"},
    )
