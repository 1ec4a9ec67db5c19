"""
hnote Backend — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the JSON wire contract of the note API.
How:   FastAPI validates request bodies against the request models and
       serializes responses through the response models (datetimes as
       RFC 3339 strings).
Who:   Route handlers and NoteService.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What clients send
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    What:  Body of POST /note.
    How:   Unknown keys (including client-supplied `id`, `create_date` and
           `last_edit_time`) are ignored; the server owns those fields.
    """
    title: str = Field(default="", description="Note title (may be empty)")
    content: str = Field(default="", description="Note body (may be empty)")

    model_config = {"extra": "ignore"}


class NoteUpdate(BaseModel):
    """
    What:  Body of PUT /note/{id}. Omitted fields keep their stored value.
    """
    title: Optional[str] = Field(default=None, description="New title")
    content: Optional[str] = Field(default=None, description="New body")

    model_config = {"extra": "ignore"}


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteOut(BaseModel):
    """
    What:  Wire representation of one note.
    Who:   Items of GET /note, body of GET/PUT /note/{id}.
    """
    id: str = Field(description="Server-assigned note identifier")
    title: str = Field(description="Note title")
    create_date: datetime = Field(description="Creation time (UTC, RFC 3339)")
    last_edit_time: datetime = Field(description="Last modification time (UTC, RFC 3339)")
    content: str = Field(description="Note body")


class NoteListResponse(BaseModel):
    """Body of GET /note. `data` is empty, never missing, when no notes exist."""
    data: List[NoteOut] = Field(description="All stored notes, in no particular order")


class NoteDetailResponse(BaseModel):
    """Body of GET /note/{id}."""
    data: NoteOut


class CreateNoteResponse(BaseModel):
    """Body of a successful POST /note (HTTP 201)."""
    message: str = Field(default="note create succeed")
    note_id: str = Field(description="Identifier of the new note")


class UpdateNoteResponse(BaseModel):
    """Body of a successful PUT /note/{id}."""
    message: str = Field(default="note update succeed")
    data: NoteOut


class MessageResponse(BaseModel):
    """Body of a successful DELETE /note/{id}."""
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error and Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every endpoint.

    Example:
        {
            "message": "failed to create note",
            "err": "store_error",
            "request_id": "1f0c9a2b"
        }
    """
    message: str = Field(description="Human-readable error description")
    err: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Note store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
