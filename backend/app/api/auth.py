"""Caller Identity — extracts the verified uid supplied by the identity provider.

Invariants:
    - The uid is trusted as-is: token verification happens upstream (auth gateway)
    - Missing or blank header yields None; the coordinator reports UNAUTHENTICATED

Design Decisions:
    - Header name from settings: gateways differ in what they forward
    - No rejection here: the claim contract owns the Unauthenticated failure
"""

from fastapi import Request

from app.config import get_settings


async def get_caller_uid(request: Request) -> str | None:
    """FastAPI dependency — verified caller uid or None."""
    uid = request.headers.get(get_settings().identity_header)
    if uid is None or not uid.strip():
        return None
    return uid
