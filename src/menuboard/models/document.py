# src/menuboard/models/document.py
"""SQLAlchemy model backing the schemaless document collections."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from menuboard.db.session import Base
from menuboard.db.time import utcnow


class Document(Base):
    """A single JSON document addressed by ``collection/doc_id``.

    Relationships between collections are denormalized foreign-key fields
    inside ``data``; the table itself enforces none of them.
    """

    __tablename__ = "document"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    @property
    def path(self) -> str:
        """Return the stable ``collection/id`` path of the document."""
        return f"{self.collection}/{self.doc_id}"
