"""
Session handling for gateway requests.

The gateway never validates session tokens itself: the caller's Appwrite
session token is read from the X-Session-Token header and handed to a fresh
Appwrite client, which lets the backend decide what the caller may do.

Every dependency here builds its objects per request. Clients bound to a
caller-supplied token must never be cached or shared.
"""

import logging
from typing import Optional

from appwrite.client import Client
from fastapi import Depends, HTTPException, Request, status

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Token"
MISSING_TOKEN_DETAIL = "No session token"


# =============================================================================
# Helper Functions
# =============================================================================

def extract_session_token(request: Request) -> Optional[str]:
    """
    Read the session token from the request headers.

    Returns:
        The token, or None when the header is absent or blank
    """
    token = request.headers.get(SESSION_HEADER)
    if token is None:
        return None
    token = token.strip()
    return token or None


def build_client(settings: Settings) -> Client:
    """Appwrite client for the configured endpoint and project, with no credential yet."""
    return (
        Client()
        .set_endpoint(settings.appwrite_endpoint_str)
        .set_project(settings.APPWRITE_PROJECT_ID)
    )


# =============================================================================
# FastAPI Dependencies
# =============================================================================

def require_session_token(request: Request) -> str:
    """
    FastAPI dependency enforcing the session header.

    Raises:
        HTTPException: 401 when the header is missing
    """
    token = extract_session_token(request)
    if not token:
        logger.info(
            "Rejected request without session token",
            extra={"path": request.url.path, "method": request.method},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MISSING_TOKEN_DETAIL,
        )
    return token


def get_user_client(
    session_token: str = Depends(require_session_token),
    settings: Settings = Depends(get_settings),
) -> Client:
    """
    Appwrite client acting as the calling user.

    Usage in routes:
        @router.get("/things")
        def list_things(client: Client = Depends(get_user_client)):
            ...
    """
    return build_client(settings).set_session(session_token)


def get_server_client(settings: Settings = Depends(get_settings)) -> Client:
    """Appwrite client using the server API key, when one is configured."""
    client = build_client(settings)
    if settings.APPWRITE_API_KEY:
        client.set_key(settings.APPWRITE_API_KEY)
    return client


def get_optional_user_client(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Client:
    """
    Appwrite client acting as the caller when a session token is sent,
    falling back to the server API key otherwise.
    """
    token = extract_session_token(request)
    if token:
        return build_client(settings).set_session(token)
    return get_server_client(settings)
