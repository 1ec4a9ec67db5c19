"""
hnote Backend — Notes Route Handlers
=====================================

What:  The /note collection and /note/{id} item endpoints.
How:   Decode the request, delegate to NoteService, return JSON with the
       documented status code. Failures are raised as HNoteError subclasses
       and rendered by the global exception handlers in main.py.

Endpoints:
    GET    /note          list all notes                  200
    POST   /note          create a note                   201
    GET    /note/{id}     fetch one note                  200 | 404
    PUT    /note/{id}     update title/content            200 | 404
    DELETE /note/{id}     delete a note                   200 | 404
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from hnote.schemas.note import (
    CreateNoteResponse,
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteDetailResponse,
    NoteListResponse,
    NoteUpdate,
    UpdateNoteResponse,
)
from hnote.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/note", tags=["Notes"])


def get_note_service(request: Request) -> NoteService:
    """Build a NoteService around the store the app was started with."""
    return NoteService(request.app.state.store)


@router.get(
    "",
    response_model=NoteListResponse,
    responses={400: {"description": "Store failure", "model": ErrorResponse}},
    summary="List all notes",
)
@router.get("/", response_model=NoteListResponse, include_in_schema=False)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> NoteListResponse:
    return await service.list_notes()


@router.post(
    "",
    response_model=CreateNoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Store failure", "model": ErrorResponse},
        422: {"description": "Malformed JSON body", "model": ErrorResponse},
    },
    summary="Create a note",
    description=(
        "Creates a note from `title` and `content`. The server assigns the id "
        "and sets both timestamps; client-supplied values for them are ignored."
    ),
)
@router.post(
    "/",
    response_model=CreateNoteResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> CreateNoteResponse:
    return await service.create_note(payload)


@router.get(
    "/{note_id}",
    response_model=NoteDetailResponse,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteDetailResponse:
    return NoteDetailResponse(data=await service.get_note(note_id))


@router.put(
    "/{note_id}",
    response_model=UpdateNoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        422: {"description": "Malformed JSON body", "model": ErrorResponse},
    },
    summary="Update a note's title and/or content",
    description="Omitted fields keep their value; last_edit_time is always refreshed.",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    service: NoteService = Depends(get_note_service),
) -> UpdateNoteResponse:
    note = await service.update_note(note_id, payload)
    return UpdateNoteResponse(data=note)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    await service.delete_note(note_id)
    return MessageResponse(message="note delete succeed")
