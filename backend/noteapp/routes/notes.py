"""
NoteApp Backend — Notes Route Handlers
=======================================

What:  REST surface for notes, rooted at /api/notes.
How:   Each handler resolves a NoteService for the request's session, calls one
       service operation, and returns the declared response model. NotFoundError
       and other failures are turned into error bodies by the global handlers.

Route order:
    Fixed paths (/search, /count, /average-length, /liked, /top-liked,
    /word-count/{id}) are declared before /{note_id}; otherwise the integer
    path parameter would claim them and answer 422.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from noteapp.database import get_db_session
from noteapp.repositories.note_repository import NoteRepository
from noteapp.schemas.note import (
    DeleteResponse,
    ErrorResponse,
    LikeTotalResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from noteapp.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


def get_note_service(db: AsyncSession = Depends(get_db_session)) -> NoteService:
    """Builds a NoteService over the request-scoped session."""
    return NoteService(NoteRepository(db))


# ── Collection ────────────────────────────────────────────────────────────


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses=SERVER_ERROR,
    summary="Create a note",
)
async def add_note(
    note: NoteCreate,
    service: NoteService = Depends(get_note_service),
):
    logger.info("Request to add a new note: subject=%s", note.subject)
    added = await service.add(note)
    logger.info("Note added successfully with ID %s", added.id)
    return added


@router.get(
    "",
    response_model=List[NoteResponse],
    summary="List all notes",
)
async def get_all_notes(service: NoteService = Depends(get_note_service)):
    logger.info("Request to get all notes")
    return await service.get_all()


@router.get(
    "/search",
    response_model=List[NoteResponse],
    summary="Search notes by subject",
    description="Case-insensitive substring match on the subject. Returns an empty list when nothing matches.",
)
async def search_notes_by_subject(
    subject: str = Query(description="Text the subject must contain"),
    service: NoteService = Depends(get_note_service),
):
    logger.info("Request to search notes by subject: %s", subject)
    return await service.search_by_subject(subject)


@router.get("/count", response_model=int, summary="Total number of notes")
async def count_total_notes(service: NoteService = Depends(get_note_service)) -> int:
    logger.info("Request to get total count of notes")
    return await service.count_all()


@router.get(
    "/average-length",
    response_model=float,
    summary="Average note length in words",
)
async def get_average_note_length(service: NoteService = Depends(get_note_service)) -> float:
    logger.info("Request to get average note length")
    return await service.average_length()


@router.get(
    "/liked",
    response_model=List[NoteResponse],
    summary="Notes with at least one like",
)
async def get_liked_notes(service: NoteService = Depends(get_note_service)):
    logger.info("Request to get all liked notes")
    return await service.get_liked()


@router.get(
    "/top-liked",
    response_model=List[NoteResponse],
    summary="Five most liked notes",
)
async def get_top_liked_notes(service: NoteService = Depends(get_note_service)):
    logger.info("Request to get top liked notes")
    return await service.get_top_liked()


@router.get(
    "/word-count/{note_id}",
    response_model=int,
    responses=NOT_FOUND,
    summary="Word count of a note's description",
)
async def get_word_count(
    note_id: int,
    service: NoteService = Depends(get_note_service),
) -> int:
    logger.info("Request to get word count for note with ID %s", note_id)
    return await service.word_count(note_id)


# ── Single note ───────────────────────────────────────────────────────────


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=NOT_FOUND,
    summary="Get a note by ID",
)
async def get_note_by_id(
    note_id: int,
    service: NoteService = Depends(get_note_service),
):
    logger.info("Request to get note with ID %s", note_id)
    return await service.get_by_id(note_id)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses=NOT_FOUND,
    summary="Partially update a note",
    description=(
        "Null fields are left unchanged. Likes are only replaced when the "
        "supplied value is greater than zero."
    ),
)
async def modify_note(
    note_id: int,
    patch: NoteUpdate,
    service: NoteService = Depends(get_note_service),
):
    logger.info("Request to modify note with ID %s", note_id)
    return await service.modify(note_id, patch)


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    service: NoteService = Depends(get_note_service),
) -> DeleteResponse:
    logger.info("Request to delete note with ID %s", note_id)
    await service.delete(note_id)
    return DeleteResponse(deleted=True)


# ── Likes ─────────────────────────────────────────────────────────────────


@router.post(
    "/{note_id}/like",
    response_model=NoteResponse,
    responses=NOT_FOUND,
    summary="Like a note",
)
async def like_note(
    note_id: int,
    service: NoteService = Depends(get_note_service),
):
    logger.info("Request to like note with ID %s", note_id)
    return await service.like(note_id)


@router.delete(
    "/{note_id}/unlike",
    response_model=NoteResponse,
    responses=NOT_FOUND,
    summary="Remove one like from a note",
)
async def unlike_note(
    note_id: int,
    service: NoteService = Depends(get_note_service),
):
    logger.info("Request to unlike note with ID %s", note_id)
    return await service.unlike(note_id)


@router.post(
    "/{note_id}/like-boost",
    response_model=LikeTotalResponse,
    responses=NOT_FOUND,
    summary="Add ten likes to a note",
)
async def boost_likes(
    note_id: int,
    service: NoteService = Depends(get_note_service),
) -> LikeTotalResponse:
    logger.info("Request to boost likes for note with ID %s", note_id)
    note = await service.boost_likes(note_id)
    return LikeTotalResponse(message="Like Boost Activated!", total_likes=note.likes)


@router.delete(
    "/{note_id}/like-reset",
    response_model=LikeTotalResponse,
    responses=NOT_FOUND,
    summary="Reset a note's likes to zero",
)
async def reset_likes(
    note_id: int,
    service: NoteService = Depends(get_note_service),
) -> LikeTotalResponse:
    logger.info("Request to reset likes for note with ID %s", note_id)
    note = await service.reset_likes(note_id)
    return LikeTotalResponse(message="All like resets", total_likes=note.likes)
