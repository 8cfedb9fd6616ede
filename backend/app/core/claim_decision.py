"""Claim Decision — pure read-check step of the atomic claim protocol.

Invariants:
    - PURE: decides from snapshots already read inside the transaction
    - Reservation check precedes profile check (taken name wins over double-claim)
    - A profile with an empty-string nickname counts as "no nickname yet"

Design Decisions:
    - Split from the coordinator so the rules are testable without a store
"""

from app.core.claim_outcome import (
    ClaimRejected,
    MSG_ALREADY_HAS_NICKNAME,
    MSG_NICKNAME_TAKEN,
    rejected,
)
from app.core.domain_types import ClaimErrorKind
from app.core.repository_protocols import ProfileSnapshot, ReservationSnapshot


def check_nickname_free(
    reservation: ReservationSnapshot | None,
) -> ClaimRejected | None:
    """Any existing reservation blocks the claim, whoever owns it."""
    if reservation is not None:
        return rejected(ClaimErrorKind.ALREADY_EXISTS, MSG_NICKNAME_TAKEN)
    return None


def check_caller_unclaimed(
    profile: ProfileSnapshot | None,
) -> ClaimRejected | None:
    """One claim per identity, permanent."""
    if profile is not None and profile.nickname:
        return rejected(
            ClaimErrorKind.FAILED_PRECONDITION, MSG_ALREADY_HAS_NICKNAME,
        )
    return None
