"""ORM Models — SQLAlchemy declarative models for the two claim records.

Invariants:
    - All models inherit from Base (db/base.py)
    - Reservation and Profile are written together in one transaction or not at all

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before
      create_all / alembic autogenerate runs
"""

from app.models.reservation import NicknameReservation  # noqa: F401
from app.models.profile import Profile  # noqa: F401
