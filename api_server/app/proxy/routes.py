"""
Proxy Routes - Appwrite Document Forwarding
===========================================

This module implements the authenticated document endpoints for songs,
playlists and playlist entries.

Security Model:
---------------
1. All requests must include the caller's Appwrite session token
   (X-Session-Token header)
2. A fresh Appwrite client is bound to that token for each request
3. Appwrite enforces document permissions for that user

Endpoints:
----------
- /api/musicas: list, create, update, delete songs
- /api/playlists: list (newest first), create, fetch one
- /api/playlist-musicas: list entries of a playlist (by "ordem"), add entry

Request bodies are forwarded as document data without local checks.
"""

import logging
from typing import Any

from appwrite.client import Client
from appwrite.id import ID
from appwrite.query import Query
from appwrite.services.databases import Databases
from fastapi import APIRouter, Body, Depends

from app.auth.session import get_user_client
from app.config import Settings, get_settings
from app.models import ErrorResponse

logger = logging.getLogger(__name__)

PLAYLIST_ID_FIELD = "playlist_id"
POSITION_FIELD = "ordem"
CREATED_AT_FIELD = "$createdAt"

# Create router
proxy_router = APIRouter(
    prefix="/api",
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


# ============================================================================
# Dependencies
# ============================================================================

def get_databases(client: Client = Depends(get_user_client)) -> Databases:
    """Databases service bound to the caller's session."""
    return Databases(client)


def document_data(body: Any = Body(None)) -> Any:
    """Request body as document data; a missing body is an empty document."""
    return {} if body is None else body


def document_id(document: Any) -> Any:
    if isinstance(document, dict):
        return document.get("$id")
    return None


# ============================================================================
# Songs
# ============================================================================

@proxy_router.get("/musicas", tags=["Songs"])
def list_musicas(
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    """List song documents."""
    return databases.list_documents(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_MUSICAS,
    )


@proxy_router.post("/musicas", tags=["Songs"])
def create_musica(
    data: Any = Depends(document_data),
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Create a song document from the request body."""
    musica = databases.create_document(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_MUSICAS,
        document_id=ID.unique(),
        data=data,
    )
    logger.info("Created song", extra={"document_id": document_id(musica)})
    return musica


@proxy_router.put("/musicas/{musica_id}", tags=["Songs"])
def update_musica(
    musica_id: str,
    data: Any = Depends(document_data),
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Update a song document with the fields in the request body."""
    return databases.update_document(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_MUSICAS,
        document_id=musica_id,
        data=data,
    )


@proxy_router.delete("/musicas/{musica_id}", tags=["Songs"])
def delete_musica(
    musica_id: str,
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    databases.delete_document(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_MUSICAS,
        document_id=musica_id,
    )
    logger.info("Deleted song", extra={"document_id": musica_id})
    return {"success": True}


# ============================================================================
# Playlists
# ============================================================================

@proxy_router.get("/playlists", tags=["Playlists"])
def list_playlists(
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    """List playlists, newest first."""
    return databases.list_documents(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_PLAYLISTS,
        queries=[Query.order_desc(CREATED_AT_FIELD)],
    )


@proxy_router.post("/playlists", tags=["Playlists"])
def create_playlist(
    data: Any = Depends(document_data),
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    playlist = databases.create_document(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_PLAYLISTS,
        document_id=ID.unique(),
        data=data,
    )
    logger.info("Created playlist", extra={"document_id": document_id(playlist)})
    return playlist


@proxy_router.get("/playlists/{playlist_id}", tags=["Playlists"])
def get_playlist(
    playlist_id: str,
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    return databases.get_document(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_PLAYLISTS,
        document_id=playlist_id,
    )


# ============================================================================
# Playlist Entries
# ============================================================================

@proxy_router.get("/playlist-musicas/{playlist_id}", tags=["Playlist Entries"])
def list_playlist_musicas(
    playlist_id: str,
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    List the entries of one playlist.

    Only rows whose playlist_id equals the path parameter are returned,
    ordered by their "ordem" position ascending.
    """
    return databases.list_documents(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_PLAYLIST_MUSICAS,
        queries=[
            Query.equal(PLAYLIST_ID_FIELD, playlist_id),
            Query.order_asc(POSITION_FIELD),
        ],
    )


@proxy_router.post("/playlist-musicas", tags=["Playlist Entries"])
def add_playlist_musica(
    data: Any = Depends(document_data),
    databases: Databases = Depends(get_databases),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Add a song to a playlist (body carries playlist_id, song and ordem)."""
    entry = databases.create_document(
        database_id=settings.DATABASE_ID,
        collection_id=settings.COLLECTION_PLAYLIST_MUSICAS,
        document_id=ID.unique(),
        data=data,
    )
    logger.info(
        "Added song to playlist",
        extra={
            "document_id": document_id(entry),
            "playlist_id": data.get(PLAYLIST_ID_FIELD) if isinstance(data, dict) else None,
        },
    )
    return entry
