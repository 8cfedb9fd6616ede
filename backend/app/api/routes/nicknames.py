"""Nickname Claims — the single write operation exposed by the service.

Invariants:
    - POST /api/v1/nicknames/claim returns {"success": true, "nickname": ...} on success
    - Failures are rendered by the global NicknameServiceError handler:
      {"error": {"code", "message"}}, nothing else
    - The body is never validated by the framework: a missing, malformed or
      non-object body reaches the coordinator as "no nickname", so the identity
      check always runs first
    - The route holds no state; a fresh coordinator wraps the shared session manager

Design Decisions:
    - Coordinator built per request via Depends: tests override one dependency
      to swap the store
    - Raw request.json() over a typed Body parameter: FastAPI would reject bad
      bodies before the route runs, ahead of UNAUTHENTICATED
"""

import logging

from fastapi import APIRouter, Depends, Request

from app.api.auth import get_caller_uid
from app.config import get_settings
from app.core.claim_outcome import ClaimRejected
from app.core.errors import ClaimError
from app.infrastructure.database import DatabaseSessionManager, get_db_manager
from app.infrastructure.nickname_store import SqlNicknameStore
from app.schemas.nickname import ClaimNicknameRequest, ClaimNicknameResponse
from app.services.claim_coordinator import ClaimCoordinator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/nicknames", tags=["nicknames"])

_CLAIM_BODY_DOC = {
    "requestBody": {
        "required": False,
        "content": {
            "application/json": {
                "schema": ClaimNicknameRequest.model_json_schema(),
            },
        },
    },
}


def get_claim_coordinator(
    sessions: DatabaseSessionManager = Depends(get_db_manager),
) -> ClaimCoordinator:
    """FastAPI dependency — coordinator over the SQL store."""
    settings = get_settings()
    return ClaimCoordinator(
        SqlNicknameStore(sessions),
        max_attempts=settings.claim_max_attempts,
        base_delay_ms=settings.claim_base_delay_ms,
        max_delay_ms=settings.claim_max_delay_ms,
    )


async def read_requested_nickname(request: Request) -> object:
    """Nickname from the JSON body, or None when there is no usable object."""
    try:
        payload = await request.json()
    except ValueError:
        # empty or malformed body; UnicodeDecodeError is a ValueError too
        return None
    return ClaimNicknameRequest.from_payload(payload).nickname


@router.post(
    "/claim",
    response_model=ClaimNicknameResponse,
    openapi_extra=_CLAIM_BODY_DOC,
)
async def claim_nickname(
    request: Request,
    caller_uid: str | None = Depends(get_caller_uid),
    coordinator: ClaimCoordinator = Depends(get_claim_coordinator),
):
    """Permanently reserve a nickname for the calling identity."""
    requested = await read_requested_nickname(request)
    outcome = await coordinator.claim(caller_uid, requested)
    if isinstance(outcome, ClaimRejected):
        raise ClaimError(outcome)
    return outcome.to_response()
