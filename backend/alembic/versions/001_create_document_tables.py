"""Create users, passwords, mentees and assets tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema. `mentees` is a single-table collection holding both
       mentee rows (pk == sk) and note rows (sk = 'Note#<id>'); see
       ibuddy/models/mentee.py.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(330), nullable=False, comment="User#<lowercased email>"),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("faculty", sa.String(200), nullable=False, server_default=sa.text("''")),
        sa.Column("role", sa.String(1), nullable=False, server_default=sa.text("'0'")),
        sa.Column("agreement_start_date", sa.Date(), nullable=False),
        sa.Column("agreement_end_date", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "passwords",
        sa.Column("user_id", sa.String(330), nullable=False, comment="Same key as users.id"),
        sa.Column("password", sa.String(128), nullable=False, comment="bcrypt hash"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "mentees",
        sa.Column("pk", sa.String(80), nullable=False, comment="Mentee#<id>"),
        sa.Column("sk", sa.String(80), nullable=False, comment="Mentee#<id> or Note#<id>"),
        sa.Column("id", sa.String(64), nullable=False),
        # mentee attributes
        sa.Column("buddy_id", sa.String(330), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("country_code", sa.String(2), nullable=True),
        sa.Column("home_university", sa.String(200), nullable=True),
        sa.Column("host_faculty", sa.String(200), nullable=True),
        sa.Column("gender", sa.String(10), nullable=True),
        sa.Column("degree", sa.String(10), nullable=True),
        sa.Column("agreement_start_date", sa.Date(), nullable=True),
        sa.Column("agreement_end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=True),
        # note attributes
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("author_id", sa.String(330), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("pk", "sk"),
    )
    op.create_index("menteesByBuddyId", "mentees", ["buddy_id"])
    op.create_index("menteeByEmail", "mentees", ["email"])

    op.create_table(
        "assets",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("owner_id", sa.String(330), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("assetsByOwnerId", "assets", ["owner_id"])


def downgrade() -> None:
    op.drop_index("assetsByOwnerId", table_name="assets")
    op.drop_table("assets")
    op.drop_index("menteeByEmail", table_name="mentees")
    op.drop_index("menteesByBuddyId", table_name="mentees")
    op.drop_table("mentees")
    op.drop_table("passwords")
    op.drop_table("users")
