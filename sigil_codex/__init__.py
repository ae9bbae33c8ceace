"""Sigil Codex: resonance, evolution and compliance metrics for user sigils.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
    - __version__ is the single version source (pyproject, FastAPI app, health probe)

Design Decisions:
    - Explicit imports only, no star exports
"""

__version__ = "1.0.0"
