"""
Proxy Package
=============

This package implements the session-authenticated document endpoints that
forward client requests to Appwrite.

Main Components:
----------------
- routes.py: FastAPI router with song, playlist and playlist-entry endpoints

Security Features:
------------------
- Session token enforcement (X-Session-Token)
- One Appwrite client per request, bound to the caller's session

Usage:
------
    from app.proxy.routes import proxy_router
    app.include_router(proxy_router)
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
