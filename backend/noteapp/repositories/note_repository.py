"""
NoteApp Backend — Note Repository
==================================

What:  Persistent collection of Note records keyed by integer id.
Who:   NoteService is its only caller.

Store order:
    Every multi-row query is ordered by ascending id, so scans are stable for
    the lifetime of the process and rankings built on top of them are
    deterministic.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noteapp.models.note import MAX_INT64, Note

logger = logging.getLogger(__name__)


class NoteRepository:
    """Note Store backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, note: Note) -> Note:
        """Adds a new note and flushes so the database assigns its id."""
        self.session.add(note)
        await self.session.flush()
        return note

    async def save(self, note: Note) -> Note:
        """Flushes pending changes of an already attached note."""
        await self.session.flush()
        return note

    async def commit(self) -> None:
        await self.session.commit()

    async def find_by_id(self, note_id: int) -> Optional[Note]:
        """Ids outside the positive 64-bit range cannot exist and never reach the driver."""
        if not 0 < note_id <= MAX_INT64:
            return None
        return await self.session.get(Note, note_id)

    async def find_all(self) -> List[Note]:
        result = await self.session.execute(select(Note).order_by(Note.id))
        return list(result.scalars().all())

    async def delete(self, note: Note) -> None:
        await self.session.delete(note)
        await self.session.flush()

    async def find_by_subject_containing(self, text: str) -> List[Note]:
        """
        Case-insensitive substring match on subject.

        autoescape=True makes `%` and `_` in the input match literally
        instead of acting as LIKE wildcards.
        """
        query = (
            select(Note)
            .where(Note.subject.icontains(text, autoescape=True))
            .order_by(Note.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_likes_greater_than(self, threshold: int) -> List[Note]:
        query = select(Note).where(Note.likes > threshold).order_by(Note.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Note.id)))
        return result.scalar() or 0
