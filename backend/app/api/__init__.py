"""API Layer — FastAPI routes, caller identity dependency, error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to the ClaimCoordinator
"""
