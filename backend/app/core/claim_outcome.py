"""Claim Outcome — explicit result type for a nickname claim.

Invariants:
    - Every claim produces exactly one of ClaimGranted | ClaimRejected
    - ClaimRejected carries a ClaimErrorKind and a human-readable message, nothing else
    - Expected failures are values, never exceptions

Design Decisions:
    - Frozen dataclasses over dicts: callers pattern-match on type or `.kind`
      (ADR: result values instead of exception-based control flow)
    - Messages live here so every layer reports the same wording
"""

from dataclasses import dataclass

from app.core.domain_types import ClaimErrorKind


MSG_UNAUTHENTICATED = "User must be authenticated to claim nickname"
MSG_NICKNAME_REQUIRED = "Nickname is required and must be a string"
MSG_NICKNAME_FORMAT = (
    "Nickname must be 3-20 characters and contain only letters, "
    "numbers, and underscores"
)
MSG_NICKNAME_TAKEN = "This nickname is already taken"
MSG_ALREADY_HAS_NICKNAME = "User already has a nickname"
MSG_INTERNAL = "Failed to claim nickname. Please try again."


@dataclass(frozen=True)
class ClaimGranted:
    """Reservation committed — nickname is the caller's original casing."""
    nickname: str

    @property
    def granted(self) -> bool:
        return True

    def to_response(self) -> dict:
        return {"success": True, "nickname": self.nickname}


@dataclass(frozen=True)
class ClaimRejected:
    """Claim refused; no store state was changed."""
    kind: ClaimErrorKind
    message: str

    @property
    def granted(self) -> bool:
        return False


ClaimOutcome = ClaimGranted | ClaimRejected


def rejected(kind: ClaimErrorKind, message: str) -> ClaimRejected:
    return ClaimRejected(kind=kind, message=message)


def internal_failure() -> ClaimRejected:
    """Generic failure — never carries the underlying cause."""
    return ClaimRejected(kind=ClaimErrorKind.INTERNAL, message=MSG_INTERNAL)
