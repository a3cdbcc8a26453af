"""
FastAPI Gateway Application Factory
===================================

This is the main entry point for the API service that sits between the
song catalogue client application and Appwrite.

Architecture:
    Client App → Gateway (this service) → Appwrite (auth + databases)

Routers:
    - /api/auth/*              : Account and session operations
    - /api/musicas             : Song documents (requires X-Session-Token)
    - /api/playlists           : Playlist documents (requires X-Session-Token)
    - /api/playlist-musicas    : Playlist entries (requires X-Session-Token)
    - /health                  : Health check endpoint

Environment Variables:
    - APPWRITE_API_KEY: Appwrite server API key (health reports whether it is set)
    - PORT: Listening port (default: 3001)
    - LOG_LEVEL: Logging level (default: INFO)
    - See app/config.py for the rest

Running the Service:
    Development:
        uvicorn app.main:app --reload --app-dir api_server --port 3001

    Production:
        uvicorn app.main:app --app-dir api_server --host 0.0.0.0 --port 3001 --workers 4

    With custom log level:
        LOG_LEVEL=DEBUG python -m app.main
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from appwrite.exception import AppwriteException
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.auth.routes import auth_router
from app.config import Settings, get_settings, validate_configuration
from app.models import HealthResponse
from app.proxy.routes import proxy_router

SERVICE_NAME = "igreja-musicas-api"
SERVICE_VERSION = "1.0.0"


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def backend_status_code(code: Any) -> int:
    """HTTP status to relay for a backend error code (500 when unusable)."""
    if isinstance(code, int) and 400 <= code <= 599:
        return code
    return 500


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Setup logging
        - Validate configuration and log any warnings
        - Log service startup information

    There are no shared resources to release on shutdown: every request
    builds its own Appwrite client.
    """
    settings: Settings = app.state.settings

    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("app.main")

    logger.info(
        f"API running on port {settings.PORT}",
        extra={
            "endpoint": f"http://localhost:{settings.PORT}",
            "appwrite_endpoint": settings.appwrite_endpoint_str,
            "project_id": settings.APPWRITE_PROJECT_ID,
        }
    )

    if settings.allowed_origins_list == ["*"]:
        logger.info("CORS enabled for all origins")
    else:
        logger.info(f"CORS enabled for: {', '.join(settings.allowed_origins_list)}")

    report = validate_configuration(settings)
    for error in report["errors"]:
        logger.error(f"Configuration error: {error}")
    for warning in report["warnings"]:
        logger.warning(f"Configuration warning: {warning}")

    yield

    logger.info("API service shutdown complete")


# Create FastAPI application
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware (every origin permitted)
        - Route handlers
        - Exception handlers

    Args:
        settings: Settings to use instead of the environment-loaded singleton

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Igreja Músicas API",
        description="Gateway forwarding auth and document requests to Appwrite",
        version=SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings
    # Routes resolve settings through get_settings; serve the ones given here
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Auth router: register, login, logout, current user, recovery
    app.include_router(auth_router)

    # Proxy router: song, playlist and playlist-entry documents
    app.include_router(proxy_router)

    # Health check endpoint
    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, str]:
        """
        Health check endpoint.

        Reports liveness and whether the Appwrite API key is configured.
        Does not contact Appwrite.
        """
        return {
            "status": "ok",
            "message": "API funcionando!",
            "appwrite": "configurado" if settings.api_key_configured else "não configurado",
        }

    # Root endpoint
    @app.get("/", tags=["System"])
    async def root() -> Dict[str, Any]:
        """
        Root endpoint with service information.

        Returns:
            dict: Service metadata and available endpoints
        """
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "endpoints": {
                "health": "/health",
                "docs": "/docs",
                "auth": "/api/auth",
                "musicas": "/api/musicas",
                "playlists": "/api/playlists",
                "playlist_musicas": "/api/playlist-musicas",
            }
        }

    @app.exception_handler(AppwriteException)
    async def appwrite_exception_handler(request: Request, exc: AppwriteException) -> JSONResponse:
        """
        Relay an Appwrite error to the client.

        Uses the backend's status code (500 when it has none) and echoes its
        message and type. Transport failures carry the underlying exception
        as their message.
        """
        status_code = backend_status_code(exc.code)
        message = str(exc.message)

        logger = logging.getLogger("app.main")
        logger.warning(
            f"Appwrite error: {message}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": status_code,
                "appwrite_type": exc.type,
            }
        )

        return JSONResponse(
            status_code=status_code,
            content={"error": message, "type": exc.type},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Render HTTP errors raised by the gateway itself as {"error": detail}."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Render unreadable requests (e.g. malformed JSON) in the relayed error shape.

        Bodies are never checked field by field, so this only fires when the
        request cannot be decoded at all.
        """
        message = "; ".join(str(error.get("msg")) for error in exc.errors()) or "Invalid request"
        return JSONResponse(
            status_code=400,
            content={"error": message, "type": "request_invalid"},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a generic 500 response.
        """
        logger = logging.getLogger("app.main")
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": "An unexpected error occurred",
                "type": "internal_server_error",
            }
        )

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
