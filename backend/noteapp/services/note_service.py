"""
NoteApp Backend — Note Service (Business Logic)
================================================

What:  All business rules over notes: partial-update merging, like arithmetic,
       timestamp stamping, and derived statistics (word count, average length,
       most-liked ranking).
How:   Operates on a NoteRepository passed in at construction. Holds no other
       state, so one instance per request is cheap and safe under concurrency.
Who:   Built by the `get_note_service` route dependency; called by route handlers.

Timestamp rules:
    add             → created_at = updated_at = now
    modify/like/unlike → updated_at = now
    boost/reset     → updated_at untouched

Transactions:
    Every mutating operation commits through the repository before it returns,
    so a failed commit surfaces as an error response and a successful response
    always describes stored data.

Error Handling:
    Missing ids raise NotFoundError. Persistence failures while adding or
    deleting (commit included) are wrapped in InternalError; anything else
    propagates to the global handler, which answers 500.
"""

import logging
from datetime import datetime, timezone
from typing import List

from noteapp.exceptions import InternalError, NoteAppError, NotFoundError
from noteapp.models.note import Note
from noteapp.repositories.note_repository import NoteRepository
from noteapp.schemas.note import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)

TOP_LIKED_LIMIT = 5
LIKE_BOOST = 10


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens; runs of whitespace count once."""
    return len(text.split())


class NoteService:
    """
    Business logic layer for note operations.

    Every id-addressed operation loads the note first and raises NotFoundError
    when it is missing, so callers never see None.
    """

    def __init__(self, repository: NoteRepository):
        self.repository = repository

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    async def _get_or_raise(self, note_id: int) -> Note:
        note = await self.repository.find_by_id(note_id)
        if note is None:
            logger.error("Note with ID %s not found", note_id)
            raise NotFoundError(resource="Note", resource_id=note_id)
        return note

    # ── Create / Update / Delete ──────────────────────────────────────────

    async def add(self, data: NoteCreate) -> Note:
        """
        Persist a new note with both timestamps set to the same instant.

        Raises:
            InternalError: the insert failed
        """
        logger.info("Adding a new note with subject: %s", data.subject)
        now = self._now()
        note = Note(
            subject=data.subject,
            description=data.description,
            likes=data.likes,
            created_at=now,
            updated_at=now,
        )
        try:
            saved = await self.repository.insert(note)
            await self.repository.commit()
        except Exception as e:
            logger.error("Failed to add note: %s", str(e), exc_info=True)
            raise InternalError(
                message="Unable to save note",
                context={"error_type": type(e).__name__},
            ) from e
        logger.info("Note with ID %s added successfully", saved.id)
        return saved

    async def modify(self, note_id: int, patch: NoteUpdate) -> Note:
        """
        Merge a partial note into an existing one.

        Only non-null subject/description overwrite; likes overwrite only when
        strictly positive, so this path can never lower or zero the counter.
        updated_at is refreshed even when nothing else changes.
        """
        logger.info("Modifying note with ID %s", note_id)
        note = await self._get_or_raise(note_id)

        if patch.subject is not None:
            logger.info("Updating subject of note with ID %s to %s", note_id, patch.subject)
            note.subject = patch.subject
        if patch.description is not None:
            logger.info("Updating description of note with ID %s", note_id)
            note.description = patch.description
        if patch.likes is not None and patch.likes > 0:
            logger.info("Updating likes of note with ID %s to %d", note_id, patch.likes)
            note.likes = patch.likes
        note.updated_at = self._now()

        updated = await self.repository.save(note)
        await self.repository.commit()
        logger.info("Note with ID %s modified successfully", note_id)
        return updated

    async def delete(self, note_id: int) -> None:
        """
        Hard-delete a note.

        Raises:
            NotFoundError: no note with this id
            InternalError: lookup or removal failed for any other reason
        """
        logger.info("Attempting to delete note with ID %s", note_id)
        try:
            note = await self._get_or_raise(note_id)
            await self.repository.delete(note)
            await self.repository.commit()
        except NoteAppError as e:
            logger.error("Failed to delete note with ID %s: %s", note_id, e.message)
            raise
        except Exception as e:
            logger.error(
                "Unexpected error while deleting note with ID %s: %s",
                note_id,
                str(e),
                exc_info=True,
            )
            raise InternalError(
                message="Unable to delete note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            ) from e
        logger.info("Note with ID %s deleted successfully", note_id)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def search_by_subject(self, subject: str) -> List[Note]:
        """Case-insensitive substring search; an empty result is not an error."""
        logger.info("Searching notes with subject containing: %s", subject)
        notes = await self.repository.find_by_subject_containing(subject)
        if not notes:
            logger.warning("No notes found with subject containing: %s", subject)
        else:
            logger.info("Found %d notes with subject containing: %s", len(notes), subject)
        return notes

    async def get_all(self) -> List[Note]:
        logger.info("Fetching all available notes")
        notes = await self.repository.find_all()
        logger.info("Found %d notes", len(notes))
        return notes

    async def get_by_id(self, note_id: int) -> Note:
        logger.info("Fetching note with ID %s", note_id)
        return await self._get_or_raise(note_id)

    async def count_all(self) -> int:
        total = await self.repository.count()
        logger.info("Total number of notes: %d", total)
        return total

    async def word_count(self, note_id: int) -> int:
        note = await self._get_or_raise(note_id)
        words = count_words(note.description)
        logger.info("Note with ID %s has %d words", note_id, words)
        return words

    async def average_length(self) -> float:
        """Mean word count across all notes; 0.0 for an empty store."""
        notes = await self.repository.find_all()
        if not notes:
            logger.info("No notes stored; average note length is 0.0")
            return 0.0
        average = sum(count_words(note.description) for note in notes) / len(notes)
        logger.info("Average note length: %.2f words", average)
        return average

    # ── Likes ─────────────────────────────────────────────────────────────

    async def like(self, note_id: int) -> Note:
        logger.info("Liking note with ID %s", note_id)
        note = await self._get_or_raise(note_id)
        note.likes += 1
        note.updated_at = self._now()
        updated = await self.repository.save(note)
        await self.repository.commit()
        logger.info("Note with ID %s liked. Total likes: %d", note_id, updated.likes)
        return updated

    async def unlike(self, note_id: int) -> Note:
        """Decrement likes, never below zero."""
        logger.info("Unliking note with ID %s", note_id)
        note = await self._get_or_raise(note_id)
        note.likes = max(note.likes - 1, 0)
        note.updated_at = self._now()
        updated = await self.repository.save(note)
        await self.repository.commit()
        logger.info("Note with ID %s unliked. Total likes: %d", note_id, updated.likes)
        return updated

    async def get_liked(self) -> List[Note]:
        notes = await self.repository.find_by_likes_greater_than(0)
        logger.info("Found %d liked notes", len(notes))
        return notes

    async def get_top_liked(self) -> List[Note]:
        """
        The most liked notes, highest first, at most TOP_LIKED_LIMIT.

        sorted() is stable (also with reverse=True), so equal like counts keep
        store order.
        """
        notes = await self.repository.find_all()
        ranked = sorted(notes, key=lambda note: note.likes, reverse=True)
        top = ranked[:TOP_LIKED_LIMIT]
        logger.info("Returning top %d most liked notes", len(top))
        return top

    async def boost_likes(self, note_id: int) -> Note:
        logger.info("Boosting likes for note with ID %s", note_id)
        note = await self._get_or_raise(note_id)
        note.likes += LIKE_BOOST
        updated = await self.repository.save(note)
        await self.repository.commit()
        logger.info("Note with ID %s boosted. New like count: %d", note_id, updated.likes)
        return updated

    async def reset_likes(self, note_id: int) -> Note:
        logger.info("Resetting likes for note with ID %s", note_id)
        note = await self._get_or_raise(note_id)
        note.likes = 0
        updated = await self.repository.save(note)
        await self.repository.commit()
        logger.info("Note with ID %s reset. New like count: %d", note_id, updated.likes)
        return updated
