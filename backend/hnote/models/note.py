"""
hnote Backend — Note SQLAlchemy Model
======================================

What:  ORM model for one document of the `notes` collection.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   NoteStore reads and writes it; NoteService maps it to the wire shape.

Column Notes:
    - id: UUID, the store's native identifier. Rendered as its canonical
      string form on the wire.
    - title / content: free text, empty string allowed.
    - create_date / last_edit_time: UTC instants. Dialects without timezone
      support (SQLite) hand them back naive; NoteService treats those as UTC.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hnote.database import Base


# Fields NoteStore.update_by_id is allowed to change
MUTABLE_FIELDS = frozenset({"title", "content", "last_edit_time"})


class Note(Base):
    """
    A stored note record.

    Lifecycle:
        1. Inserted with both timestamps set to the same instant
        2. Updated in place; last_edit_time moves forward, create_date never changes
        3. Deleted outright (no tombstone)
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    create_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    last_edit_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"last_edit_time='{self.last_edit_time}')>"
        )
