"""
Authentication routes.

Each endpoint forwards to a single Appwrite Account operation and returns
its result. Errors raised by the backend are not handled here; the
application-level AppwriteException handler relays them to the client.

Handlers are plain functions: the Appwrite SDK blocks on its HTTP calls, so
FastAPI runs them in its threadpool.
"""

import logging
from typing import Any, Dict

from appwrite.client import Client
from appwrite.id import ID
from appwrite.services.account import Account
from fastapi import APIRouter, Body, Depends

from app.config import Settings, get_settings
from app.models import ErrorResponse
from app.auth.session import get_optional_user_client, get_server_client, get_user_client

logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

auth_router = APIRouter(
    prefix="/api/auth",
    tags=["Authentication"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


def body_field(body: Any, name: str) -> Any:
    """Value of ``name`` in a JSON object body; None for anything else."""
    if isinstance(body, dict):
        return body.get(name)
    return None


# =============================================================================
# Account Endpoints
# =============================================================================

@auth_router.post("/register")
def register(
    body: Any = Body(None),
    client: Client = Depends(get_server_client),
) -> Dict[str, Any]:
    """
    Create an account and open a session for it right away.

    Body: {"email", "password", "name"}

    Returns:
        {"user": <Appwrite user>, "session": <Appwrite session>}
    """
    email = body_field(body, "email")
    password = body_field(body, "password")
    account = Account(client)

    user = account.create(
        user_id=ID.unique(),
        email=email,
        password=password,
        name=body_field(body, "name"),
    )
    session = account.create_email_password_session(email=email, password=password)

    if isinstance(user, dict):
        logger.info("Account registered", extra={"user_id": user.get("$id")})

    return {"user": user, "session": session}


@auth_router.post("/login")
def login(
    body: Any = Body(None),
    client: Client = Depends(get_server_client),
) -> Dict[str, Any]:
    """Create an email/password session. Body: {"email", "password"}"""
    session = Account(client).create_email_password_session(
        email=body_field(body, "email"),
        password=body_field(body, "password"),
    )
    return {"session": session}


@auth_router.post("/logout")
def logout(
    body: Any = Body(None),
    client: Client = Depends(get_optional_user_client),
) -> Dict[str, Any]:
    """
    Delete a session.

    The session ID comes from the body ("sessionId"). When the caller also
    sends its session token the deletion runs as that user, otherwise with
    the server API key.
    """
    Account(client).delete_session(session_id=body_field(body, "sessionId"))

    return {"success": True}


@auth_router.get("/user")
def current_user(
    client: Client = Depends(get_user_client),
) -> Dict[str, Any]:
    """Return the user owning the session token."""
    user = Account(client).get()
    return {"user": user}


@auth_router.post("/recovery")
def recovery(
    body: Any = Body(None),
    client: Client = Depends(get_server_client),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Send a password recovery email.

    Falls back to RECOVERY_REDIRECT_URL when the client gives no redirectUrl.
    """
    redirect_url = body_field(body, "redirectUrl") or settings.RECOVERY_REDIRECT_URL

    Account(client).create_recovery(email=body_field(body, "email"), url=redirect_url)

    return {"success": True}
