"""Profile ORM — an identity's claimed nickname and audit timestamps.

Invariants:
    - uid is the primary key (one profile per identity)
    - nickname, once non-empty, is never overwritten by this service
    - nickname_lower is UNIQUE across profiles (mirrors the reservation key)
    - created_at set once; updated_at stamped by the server on every write

Design Decisions:
    - nickname columns nullable: a profile may exist before any claim
      (e.g. created at sign-up by another service)
"""

from datetime import datetime

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Profile(Base):
    """Profile record — keyed by caller identity."""
    __tablename__ = "profiles"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    nickname: Mapped[str | None] = mapped_column(String(20), nullable=True)
    nickname_lower: Mapped[str | None] = mapped_column(
        String(20), nullable=True, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
