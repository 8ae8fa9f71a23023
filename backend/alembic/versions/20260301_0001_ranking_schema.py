"""ranking schema

Revision ID: 20260301_0001
Revises: 
Create Date: 2026-03-01 00:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "athletes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("team", sa.String(length=20), nullable=False),
    )
    op.create_index("ix_athletes_id", "athletes", ["id"])
    op.create_index("ix_athletes_team", "athletes", ["team"])

    op.create_table(
        "execution_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("training_id", sa.Integer(), nullable=True),
        sa.Column("fundamento", sa.String(length=40), nullable=False),
        sa.Column("hits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("misses", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("date", sa.Date(), nullable=False),
    )
    op.create_index("ix_execution_records_athlete_id", "execution_records", ["athlete_id"])
    op.create_index("ix_execution_records_fundamento", "execution_records", ["fundamento"])

    op.create_table(
        "qualitative_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("training_id", sa.Integer(), nullable=True),
        sa.Column("fundamento", sa.String(length=40), nullable=False),
        sa.Column("event_type", sa.String(length=60), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_qualitative_events_athlete_id", "qualitative_events", ["athlete_id"])
    op.create_index("ix_qualitative_events_fundamento", "qualitative_events", ["fundamento"])


def downgrade() -> None:
    op.drop_index("ix_qualitative_events_fundamento", table_name="qualitative_events")
    op.drop_index("ix_qualitative_events_athlete_id", table_name="qualitative_events")
    op.drop_table("qualitative_events")
    op.drop_index("ix_execution_records_fundamento", table_name="execution_records")
    op.drop_index("ix_execution_records_athlete_id", table_name="execution_records")
    op.drop_table("execution_records")
    op.drop_index("ix_athletes_team", table_name="athletes")
    op.drop_index("ix_athletes_id", table_name="athletes")
    op.drop_table("athletes")
