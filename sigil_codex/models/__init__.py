"""ORM Models: SQLAlchemy declarative models for persisted codex entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every row is scoped by user_id; no cross-user queries

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata holds every table before
      create_all() or Alembic autogenerate runs
"""

from sigil_codex.models.sigil import Sigil  # noqa: F401
from sigil_codex.models.sigil_alignment import SigilAlignment  # noqa: F401
from sigil_codex.models.journal_entry import JournalEntry  # noqa: F401
from sigil_codex.models.user_progress import UserProgress  # noqa: F401
