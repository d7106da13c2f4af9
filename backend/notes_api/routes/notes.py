"""
Notes API — Notes Route Handlers
==================================

What:  The REST surface of the note store.
Why:   Maps HTTP verbs onto NoteService calls.
How:   Parses path/query/body via FastAPI + Pydantic, delegates to NoteService,
       and lets the global exception handlers turn errors into JSON.

Route Inventory:
    GET       /notes                 active notes, newest first
    GET       /notes/archived        archived notes, newest first
    GET       /notes/{id}            single note
    POST      /notes                 create (201)
    PUT|PATCH /notes/{id}            partial update
    PUT       /notes/{id}/archive    archive / unarchive
    DELETE    /notes/{id}            permanent delete

Route order matters: /notes/archived is declared before /notes/{note_id}.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import get_db_session
from notes_api.models.note import NoteCategory
from notes_api.schemas.note import (
    ArchiveRequest,
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from notes_api.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])

NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Invalid input", "model": ErrorResponse}}
SERVER_ERROR = {500: {"description": "Store failure", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="List active notes",
)
async def list_active_notes(
    q: Optional[str] = Query(
        default=None,
        max_length=200,
        description="Case-insensitive text matched against title and content",
    ),
    category: Optional[NoteCategory] = Query(
        default=None,
        description="Only notes in this category",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    """Notes with archived = false, ordered by creation time descending."""
    return await note_service.list_active(db, query=q, category=category)


@router.get(
    "/archived",
    response_model=List[NoteResponse],
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="List archived notes",
)
async def list_archived_notes(
    q: Optional[str] = Query(
        default=None,
        max_length=200,
        description="Case-insensitive text matched against title and content",
    ),
    category: Optional[NoteCategory] = Query(
        default=None,
        description="Only notes in this category",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    """Notes with archived = true, ordered by creation time descending."""
    return await note_service.list_archived(db, query=q, category=category)


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="Create a note",
)
async def create_note(
    data: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Create a note from {title?, content, category?}.

    Missing or blank content is rejected with 400 before the service runs.
    """
    return await note_service.create(db, data)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Get a single note",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get(db, note_id)


@router.api_route(
    "/{note_id}",
    methods=["PUT", "PATCH"],
    response_model=NoteResponse,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
    summary="Update a note",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """Apply only the fields present in the body; PUT and PATCH behave the same."""
    return await note_service.update(db, note_id, data)


@router.put(
    "/{note_id}/archive",
    response_model=NoteResponse,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
    summary="Archive or unarchive a note",
)
async def set_note_archived(
    note_id: str,
    data: ArchiveRequest,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.set_archived(db, note_id, data.archived)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Delete a note permanently",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await note_service.delete(db, note_id)
    return MessageResponse(message="Note deleted successfully")
