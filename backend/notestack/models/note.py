"""
notestack: Note SQLAlchemy Model
==================================

What:  ORM model for the `notes` table.
Who:   Used by SqlNoteStore for queries and by ensure_schema() for DDL.

Table:
    notes(
        id          SERIAL PRIMARY KEY,
        title       TEXT NOT NULL,
        body        TEXT NOT NULL,
        created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
    )

id and created_at are assigned by the database; the application only ever
inserts title and body.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from notestack.database import Base


class Note(Base):
    """
    A stored note.

    Lifecycle:
        1. Inserted on POST /notes (id and created_at come back via RETURNING)
        2. Read on GET /notes, newest id first
        3. Deleted on DELETE /notes/{id}; there is no update
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    body: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
