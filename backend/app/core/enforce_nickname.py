"""Nickname Precondition Enforcement — fail-fast checks run before any store access.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return ClaimRejected on violation, None on success
    - Check order is fixed: identity, then presence/type, then format
    - No trimming or Unicode folding; only lowercase for the lookup key

Design Decisions:
    - isinstance(str) check before the regex: JSON bodies can carry numbers,
      lists or null for "nickname"
"""

from app.core.claim_outcome import (
    ClaimRejected,
    MSG_NICKNAME_FORMAT,
    MSG_NICKNAME_REQUIRED,
    MSG_UNAUTHENTICATED,
    rejected,
)
from app.core.domain_types import (
    ClaimErrorKind, NICKNAME_PATTERN, NormalizedNickname,
)


def check_caller_identity(caller_uid: object) -> ClaimRejected | None:
    """Caller must carry a verified, non-empty identity."""
    if not isinstance(caller_uid, str) or not caller_uid.strip():
        return rejected(ClaimErrorKind.UNAUTHENTICATED, MSG_UNAUTHENTICATED)
    return None


def check_nickname_present(requested: object) -> ClaimRejected | None:
    """Nickname must be a non-empty string."""
    if not requested or not isinstance(requested, str):
        return rejected(ClaimErrorKind.INVALID_ARGUMENT, MSG_NICKNAME_REQUIRED)
    return None


def check_nickname_format(requested: str) -> ClaimRejected | None:
    """3-20 characters from [A-Za-z0-9_]."""
    # fullmatch: "$" alone would accept a trailing newline
    if not NICKNAME_PATTERN.fullmatch(requested):
        return rejected(ClaimErrorKind.INVALID_ARGUMENT, MSG_NICKNAME_FORMAT)
    return None


def validate_claim_request(
    caller_uid: object, requested: object,
) -> ClaimRejected | None:
    """Run all preconditions in order; first violation wins."""
    error = check_caller_identity(caller_uid)
    if error:
        return error
    error = check_nickname_present(requested)
    if error:
        return error
    return check_nickname_format(requested)  # type: ignore[arg-type]


def normalize_nickname(nickname: str) -> NormalizedNickname:
    """Uniqueness key — lowercase of the validated nickname."""
    return NormalizedNickname(nickname.lower())
