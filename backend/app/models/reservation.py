"""NicknameReservation ORM — proof that a normalized nickname is taken.

Invariants:
    - nickname_lower is the primary key: at most one row per normalized nickname, ever
    - uid is UNIQUE: one reservation per identity
    - Rows are never updated or deleted by this service
    - claimed_at is stamped by the database server

Design Decisions:
    - Database-level PK/UNIQUE back the transactional checks: a racing insert
      fails with IntegrityError instead of duplicating state
"""

from datetime import datetime

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class NicknameReservation(Base):
    """Reservation record — keyed by lowercase nickname."""
    __tablename__ = "nickname_reservations"

    nickname_lower: Mapped[str] = mapped_column(String(20), primary_key=True)
    uid: Mapped[str] = mapped_column(
        String(128), nullable=False, unique=True,
    )
    claimed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
