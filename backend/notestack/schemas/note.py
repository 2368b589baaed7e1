"""
notestack: Pydantic Request/Response Schemas
==============================================

What:  The API contract of the notes service.
How:   Request bodies are validated against these models and FastAPI serializes
       responses from them; the OpenAPI document is generated from them too.

Schemas are kept apart from the ORM model so the in-memory store and the
SQL store return the same type.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictStr


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /notes.

    Missing fields default to "" so they fail the same blank check as
    whitespace-only values. Non-string values are rejected as malformed.
    """
    title: StrictStr = Field(default="", description="Note title (trimmed, non-empty)")
    body: StrictStr = Field(default="", description="Note body (trimmed, non-empty)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """A stored note as returned by POST /notes and GET /notes."""
    id: int = Field(description="Database-assigned identifier")
    title: str
    body: str
    created_at: datetime = Field(description="Creation time (RFC 3339)")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    Error envelope used by every JSON error response.

    Example:
        {
            "error": "validation_error",
            "message": "title and body required",
            "details": {"field": "title"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
