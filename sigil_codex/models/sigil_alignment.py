"""Sigil Alignment ORM: the (user, sigil) -> timeline node relation.

Invariants:
    - Unique on (user_id, sigil_id): one node per sigil, re-alignment overwrites
    - sigil_id references sigils.id
    - timeline_node_id is a catalog id (core/timeline_nodes.py), not a FK
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sigil_codex.db.base import Base


class SigilAlignment(Base):
    __tablename__ = "sigil_alignments"
    __table_args__ = (
        UniqueConstraint("user_id", "sigil_id", name="uq_alignment_user_sigil"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sigil_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sigils.id", ondelete="CASCADE"),
        nullable=False,
    )
    timeline_node_id: Mapped[str] = mapped_column(String(50), nullable=False)
    alignment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
