"""Create ifs_score_records and ifs_daily_checkins tables.

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "ifs_score_records",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("score_date", sa.Date(), nullable=False),
        sa.Column("internal_fortitude", sa.Float(), nullable=False),
        sa.Column("external_accountability", sa.Float(), nullable=False),
        sa.Column("high_stakes_integrity", sa.Float(), nullable=False),
        sa.Column("composite_score", sa.Integer(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("recorded_by", sa.String(), nullable=True),
        sa.Column(
            "recorded_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("owner_id", "score_date", name="uq_ifs_owner_date"),
    )
    op.create_index(op.f("ix_ifs_score_records_owner_id"), "ifs_score_records", ["owner_id"])
    op.create_index(
        op.f("ix_ifs_score_records_score_date"), "ifs_score_records", ["score_date"]
    )

    op.create_table(
        "ifs_daily_checkins",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("checkin_date", sa.Date(), nullable=False),
        sa.Column("truth", sa.Boolean(), nullable=False),
        sa.Column("fidelity", sa.Boolean(), nullable=False),
        sa.Column("courage", sa.Boolean(), nullable=False),
        sa.Column(
            "recorded_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("owner_id", "checkin_date", name="uq_ifs_checkin_owner_date"),
    )
    op.create_index(
        op.f("ix_ifs_daily_checkins_owner_id"), "ifs_daily_checkins", ["owner_id"]
    )
    op.create_index(
        op.f("ix_ifs_daily_checkins_checkin_date"), "ifs_daily_checkins", ["checkin_date"]
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_ifs_daily_checkins_checkin_date"), table_name="ifs_daily_checkins")
    op.drop_index(op.f("ix_ifs_daily_checkins_owner_id"), table_name="ifs_daily_checkins")
    op.drop_table("ifs_daily_checkins")
    op.drop_index(op.f("ix_ifs_score_records_score_date"), table_name="ifs_score_records")
    op.drop_index(op.f("ix_ifs_score_records_owner_id"), table_name="ifs_score_records")
    op.drop_table("ifs_score_records")
