"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Checks are pure and deterministic; store access is described by Protocols only

Design Decisions:
    - Functional core separated from imperative shell
"""
