"""Core Layer: pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure; the only non-determinism is the default law
      padding in check_compliance.py, which callers can seed or replace

Design Decisions:
    - Functional core separated from imperative shell (impureim sandwich)
"""
