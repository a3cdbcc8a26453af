"""
Data Models Module

Pydantic models for the gateway's response bodies.

Request bodies have no models: the gateway forwards whatever JSON the client
sent and lets Appwrite report what is missing or invalid.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Health Check Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service health status")
    message: str = Field(..., description="Human-readable status message")
    appwrite: str = Field(..., description="Whether the Appwrite API key is configured")


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Error body relayed to clients."""
    error: Optional[str] = Field(None, description="Error message")
    type: Optional[str] = Field(None, description="Appwrite error type, when known")
