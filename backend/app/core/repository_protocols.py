"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All store IO accessed through Protocol types
    - One ClaimTransaction == one serializable store transaction
    - transact() commits iff the body's outcome is granted; otherwise rolls back
    - transact() raises TransactionConflictError when the store detected a
      conflicting concurrent write, and the caller may re-run the body

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Snapshots are frozen dataclasses: a read never hands out live ORM state
    - Timestamps are never passed in: the store stamps them server-side
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from app.core.claim_outcome import ClaimOutcome
from app.core.domain_types import NormalizedNickname, Uid


@dataclass(frozen=True)
class ReservationSnapshot:
    """Proof that a normalized nickname is taken, and by whom."""
    nickname_lower: NormalizedNickname
    uid: Uid
    claimed_at: datetime | None = None


@dataclass(frozen=True)
class ProfileSnapshot:
    """Caller profile as read inside the claim transaction."""
    uid: Uid
    nickname: str | None = None
    nickname_lower: NormalizedNickname | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClaimTransaction(Protocol):
    """Reads and buffered writes inside one atomic store transaction."""
    async def get_reservation(
        self, nickname_lower: NormalizedNickname,
    ) -> ReservationSnapshot | None: ...
    async def get_profile(self, uid: Uid) -> ProfileSnapshot | None: ...
    async def create_reservation(
        self, nickname_lower: NormalizedNickname, uid: Uid,
    ) -> None: ...
    async def create_profile(
        self, uid: Uid, nickname: str, nickname_lower: NormalizedNickname,
    ) -> None: ...
    async def set_profile_nickname(
        self, uid: Uid, nickname: str, nickname_lower: NormalizedNickname,
    ) -> None: ...


ClaimBody = Callable[[ClaimTransaction], Awaitable[ClaimOutcome]]


class NicknameStore(Protocol):
    """Contract for the transactional nickname store — implemented by shell."""
    async def transact(self, body: ClaimBody) -> ClaimOutcome: ...
