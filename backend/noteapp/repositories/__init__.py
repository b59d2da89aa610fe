"""
NoteApp Backend — Repositories (Note Store)
============================================

What:  Query layer between services and the ORM session.
How:   Each repository wraps one AsyncSession and exposes the lookups its
       service needs. Writes are flushed, never committed: the transaction
       belongs to the session dependency.
"""

from noteapp.repositories.note_repository import NoteRepository

__all__ = ["NoteRepository"]
