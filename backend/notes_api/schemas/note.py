"""
Notes API — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract for notes.
Why:   A request body that can be built into NoteCreate / NoteUpdate is valid
       by construction, so the service never sees empty content or an
       unknown category.
How:   FastAPI validates request bodies against these models, serializes
       responses through them, and generates OpenAPI docs from them.

Design Decision:
    Schemas are separate from the SQLAlchemy model because the API speaks
    camelCase (createdAt, updatedAt) while the table uses snake_case, and
    because create/update have different optionality rules.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from notes_api.models.note import DEFAULT_CATEGORY, NoteCategory


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What clients send
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    What:  Body of POST /notes.

    Rules:
        - content: required; surrounding whitespace is trimmed and the
          result must not be empty
        - title: optional; missing, null or empty becomes ""
        - category: optional; missing, null or empty becomes "Personal"
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(default="")
    content: str = Field(min_length=1, description="Note body (required, non-empty)")
    category: NoteCategory = Field(default=DEFAULT_CATEGORY)

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Any) -> Any:
        return v or ""

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        return v or DEFAULT_CATEGORY


class NoteUpdate(BaseModel):
    """
    What:  Body of PUT/PATCH /notes/{id}; every field is optional.

    Only fields present in the body are applied (see `changes()`).
    A field that is present must still satisfy the create-time rules:
    explicit null is rejected for content, category and archived, and a
    null title clears it to "".
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = None
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[NoteCategory] = None
    archived: Optional[bool] = None

    # Before-validators only run for values actually sent, so a missing
    # field stays None and is left out of changes().
    @field_validator("title", mode="before")
    @classmethod
    def null_title_clears(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("content", "category", "archived", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("may not be null")
        return v

    def changes(self) -> dict:
        """The fields the client actually sent, ready to apply to a Note."""
        return self.model_dump(exclude_unset=True)


class ArchiveRequest(BaseModel):
    """Body of PUT /notes/{id}/archive."""
    archived: bool = Field(description="true to archive, false to restore")


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note.
    Who:   Returned by every endpoint that reads or writes a single note,
           and as the item type of both listings.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    category: NoteCategory
    archived: bool
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (UTC ISO 8601)")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite returns naive values; everything is stored in UTC
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after DELETE."""
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Note with ID '...' was not found",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and container health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
