"""SQL Nickname Store — runs one claim body inside one database transaction.

Invariants:
    - One transact() call == one session == one transaction
    - Commit only when the body's outcome is granted; otherwise roll back
    - Timestamps come from the database server (func.now()), never the app clock
    - Profile update touches only nickname fields and updated_at

Design Decisions:
    - Core insert/update statements over ORM unit-of-work: server-side
      timestamp expressions are never loaded back into async ORM state
    - Conflict detection is delegated to DatabaseSessionManager, which maps
      serialization failures and unique-key races to TransactionConflictError
"""

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.claim_outcome import ClaimOutcome
from app.core.domain_types import NormalizedNickname, Uid
from app.core.repository_protocols import (
    ClaimBody, ProfileSnapshot, ReservationSnapshot,
)
from app.infrastructure.database import DatabaseSessionManager
from app.models.profile import Profile
from app.models.reservation import NicknameReservation


class SqlClaimTransaction:
    """ClaimTransaction bound to an open AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_reservation(
        self, nickname_lower: NormalizedNickname,
    ) -> ReservationSnapshot | None:
        result = await self.db.execute(
            select(NicknameReservation).where(
                NicknameReservation.nickname_lower == nickname_lower,
            ),
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return ReservationSnapshot(
            nickname_lower=NormalizedNickname(row.nickname_lower),
            uid=Uid(row.uid),
            claimed_at=row.claimed_at,
        )

    async def get_profile(self, uid: Uid) -> ProfileSnapshot | None:
        result = await self.db.execute(
            select(Profile).where(Profile.uid == uid),
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return ProfileSnapshot(
            uid=Uid(row.uid),
            nickname=row.nickname,
            nickname_lower=(
                NormalizedNickname(row.nickname_lower)
                if row.nickname_lower else None
            ),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def create_reservation(
        self, nickname_lower: NormalizedNickname, uid: Uid,
    ) -> None:
        await self.db.execute(
            insert(NicknameReservation).values(
                nickname_lower=nickname_lower, uid=uid, claimed_at=func.now(),
            ),
        )

    async def create_profile(
        self, uid: Uid, nickname: str, nickname_lower: NormalizedNickname,
    ) -> None:
        await self.db.execute(
            insert(Profile).values(
                uid=uid,
                nickname=nickname,
                nickname_lower=nickname_lower,
                created_at=func.now(),
                updated_at=func.now(),
            ),
        )

    async def set_profile_nickname(
        self, uid: Uid, nickname: str, nickname_lower: NormalizedNickname,
    ) -> None:
        await self.db.execute(
            update(Profile)
            .where(Profile.uid == uid)
            .values(
                nickname=nickname,
                nickname_lower=nickname_lower,
                updated_at=func.now(),
            ),
        )


class SqlNicknameStore:
    """NicknameStore backed by the SQLAlchemy session manager."""

    def __init__(self, sessions: DatabaseSessionManager):
        self.sessions = sessions

    async def transact(self, body: ClaimBody) -> ClaimOutcome:
        async with self.sessions.session() as db:
            outcome = await body(SqlClaimTransaction(db))
            if outcome.granted:
                await db.commit()
            else:
                await db.rollback()
            return outcome
