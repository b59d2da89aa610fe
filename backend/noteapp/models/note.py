"""
NoteApp Backend — Note SQLAlchemy Model
========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; tables are created from this
       metadata at startup.
Who:   Used by NoteRepository for every query and by NoteService for mutations.

Table Design:
    - 64-bit integer primary key assigned by the database; AUTOINCREMENT on SQLite so
      ids of deleted rows are never handed out again
    - subject / description: free text, description drives word statistics
    - likes: non-negative counter, server default 0
    - created_at / updated_at: UTC timestamps written by the service layer
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from noteapp.database import Base


# Upper bound of the 64-bit id and likes columns
MAX_INT64 = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp on every backend.

    SQLite has no timezone storage and hands back naive values; those are
    read back as UTC so API timestamps always carry an offset.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Note(Base):
    """
    A single note record.

    Lifecycle:
        1. Created by NoteService.add (both timestamps stamped, likes 0 unless set)
        2. Mutated by modify / like / unlike (updated_at refreshed)
           and by boost / reset (updated_at left as is)
        3. Hard-deleted by NoteService.delete
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    subject: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    likes: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    # likes index serves the "liked notes" filter (likes > 0)
    __table_args__ = (
        Index("idx_notes_likes", "likes"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, subject={self.subject!r}, likes={self.likes}, "
            f"updated_at='{self.updated_at}')>"
        )
