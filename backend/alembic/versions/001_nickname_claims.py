"""Nickname claims schema — nickname_reservations, profiles.

Revision ID: 001_nickname_claims
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_nickname_claims"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "nickname_reservations",
        sa.Column("nickname_lower", sa.String(20), primary_key=True),
        sa.Column("uid", sa.String(128), nullable=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("uid", name="uq_nickname_reservations_uid"),
    )

    op.create_table(
        "profiles",
        sa.Column("uid", sa.String(128), primary_key=True),
        sa.Column("nickname", sa.String(20), nullable=True),
        sa.Column("nickname_lower", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("nickname_lower", name="uq_profiles_nickname_lower"),
    )


def downgrade() -> None:
    op.drop_table("profiles")
    op.drop_table("nickname_reservations")
