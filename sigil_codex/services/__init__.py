"""Services Layer: the imperative shell that drives the codex core.

Invariants:
    - codex_service.py owns the write-then-update-then-recompute ordering
    - sql_repositories.py is the only module that talks to the ORM

Design Decisions:
    - Repositories injected into CodexService as protocol implementations,
      so tests substitute AsyncMock fakes
"""
