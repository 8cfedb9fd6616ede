"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Uid is the verified caller identity, trusted as-is and never parsed
    - NormalizedNickname is always lowercase: the uniqueness key
    - All failure kinds encoded as an Enum — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum for ClaimErrorKind: serializes to JSON without custom encoders
"""

import re
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Uid = NewType("Uid", str)
NormalizedNickname = NewType("NormalizedNickname", str)


# ─── Nickname Format ─────────────────────────────────────────────

NICKNAME_MIN_LENGTH = 3
NICKNAME_MAX_LENGTH = 20
NICKNAME_PATTERN = re.compile(
    rf"^[A-Za-z0-9_]{{{NICKNAME_MIN_LENGTH},{NICKNAME_MAX_LENGTH}}}$",
)


# ─── Enums ───────────────────────────────────────────────────────

class ClaimErrorKind(str, Enum):
    """Caller-facing failure taxonomy for a nickname claim."""
    UNAUTHENTICATED = "unauthenticated"
    INVALID_ARGUMENT = "invalid_argument"
    ALREADY_EXISTS = "already_exists"
    FAILED_PRECONDITION = "failed_precondition"
    INTERNAL = "internal"
