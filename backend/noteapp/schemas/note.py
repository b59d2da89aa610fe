"""
NoteApp Backend — Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract.
How:   FastAPI validates request bodies against the input models and serializes
       ORM objects through the response models (from_attributes=True).
       Response keys are camelCase (createdAt, updatedAt); snake_case names are
       accepted on input as well.

Schemas are kept separate from the SQLAlchemy model so the wire format can
differ from the table layout.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from noteapp.models.note import MAX_INT64


_API_MODEL_CONFIG = {
    "from_attributes": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    What:  Body of POST /api/notes.
    Likes default to 0; a caller may seed a positive count.
    """
    subject: str = Field(description="Short subject line, searchable")
    description: str = Field(description="Note body; drives word statistics")
    likes: int = Field(default=0, ge=0, le=MAX_INT64, description="Initial like count")

    model_config = _API_MODEL_CONFIG


class NoteUpdate(BaseModel):
    """
    What:  Body of PUT /api/notes/{id} — a partial note.

    Merge rules (applied by NoteService.modify):
        - subject / description: replaced only when not null
        - likes: replaced only when strictly greater than zero
    """
    subject: Optional[str] = Field(default=None, description="New subject, or null to keep")
    description: Optional[str] = Field(default=None, description="New description, or null to keep")
    likes: Optional[int] = Field(
        default=None, le=MAX_INT64, description="New like count; ignored unless > 0"
    )

    model_config = _API_MODEL_CONFIG


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note."""
    id: int = Field(description="Store-assigned note identifier")
    subject: Optional[str] = Field(default=None, description="Subject line")
    description: str = Field(description="Note body")
    likes: int = Field(description="Current like count (never negative)")
    created_at: datetime = Field(description="When the note was created (UTC)")
    updated_at: datetime = Field(description="Last content or like change (UTC)")

    model_config = _API_MODEL_CONFIG


class LikeTotalResponse(BaseModel):
    """
    What:  Returned by the like-boost and like-reset endpoints.
    Shape: {"message": "...", "TotalLikes": 12}
    """
    message: str = Field(description="Human-readable outcome")
    total_likes: int = Field(alias="TotalLikes", description="Like count after the change")

    model_config = {"populate_by_name": True}


class DeleteResponse(BaseModel):
    """Returned by DELETE /api/notes/{id}."""
    deleted: bool = Field(default=True)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body for 404 and 500 responses.

    Example:
        {
            "timestamp": "2026-10-18T12:00:00.000000+00:00",
            "status": 404,
            "error": "Note Not Found",
            "message": "Note with ID 42 not found",
            "path": "/api/notes/42"
        }
    """
    timestamp: datetime = Field(description="When the error was produced (UTC)")
    status: int = Field(description="HTTP status code")
    error: str = Field(description="Short error label")
    message: str = Field(description="Human-readable error description")
    path: str = Field(description="Request path that failed")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
