"""
Authentication Package

This package handles account and session endpoints for the gateway and the
per-request scoping of Appwrite clients to a caller's session token.

Modules:
- routes: Public authentication endpoints (/api/auth/register, /login, ...)
- session: Session header extraction and Appwrite client dependencies

The authentication flow:
1. Client registers or logs in via /api/auth/*
2. Appwrite issues a session; its secret is returned to the client
3. Client sends the session token in X-Session-Token on later requests
4. Gateway builds a client bound to that token for the one request
"""

from .routes import auth_router

__all__ = [
    "auth_router",
]
