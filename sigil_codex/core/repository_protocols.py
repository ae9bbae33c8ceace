"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Every call is all-or-nothing: it either returns or raises, no partial writes
    - Failures are raised as CodexError subclasses (core/errors.py)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never await; the shell orchestrates the async calls
      around the pure logic
"""

from typing import Protocol

from sigil_codex.core.codex_types import Sigil, SigilParameters
from sigil_codex.core.domain_types import NodeId, SigilId, UserId


class SigilRepository(Protocol):
    """Contract for sigil persistence. insert assigns id and created_at."""
    async def insert(self, user_id: UserId, params: SigilParameters) -> Sigil: ...
    async def list_by_owner(self, user_id: UserId) -> list[Sigil]: ...


class AlignmentRepository(Protocol):
    """Contract for alignment persistence. upsert is keyed by (user, sigil)."""
    async def upsert(
        self, user_id: UserId, sigil_id: SigilId, node_id: NodeId,
    ) -> None: ...
    async def list_by_owner(
        self, user_id: UserId,
    ) -> list[tuple[SigilId, NodeId]]: ...


class JournalRepository(Protocol):
    """Contract for the append-only event log. Never read back by the core."""
    async def append(self, entry: dict) -> None: ...


class XPAwarder(Protocol):
    """Peer leveling subsystem. The codex only reports earned XP."""
    async def add_xp(self, user_id: UserId, amount: int) -> None: ...
