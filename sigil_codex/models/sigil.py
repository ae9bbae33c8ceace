"""Sigil ORM: persists one user-generated sigil and its parameter payload.

Invariants:
    - id is a string UUID assigned on insert
    - user_id is the sole owner; never changes
    - created_at is set once on insert and never updated
    - parameters holds chakra, frequency, intention, numerology, svg and the
      evolution back-reference as one JSON document

Design Decisions:
    - JSON column for parameters: the payload is written and read whole, never
      queried field by field
    - String ids over dialect UUID: domain ids are opaque strings
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from sigil_codex.db.base import Base


class Sigil(Base):
    """Sigil row, the persisted form of core.codex_types.Sigil."""
    __tablename__ = "sigils"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True,
    )
    parameters: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
