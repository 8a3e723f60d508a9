"""Baseline: owners, bikes, theft_reports, bike_images.

Revision ID: 0001
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "owners",
        sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(100)),
        sa.Column("phone", sa.String(50)),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "bikes",
        sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column("vin", sa.String(32), unique=True),
        sa.Column("make", sa.String(50), nullable=False),
        sa.Column("model", sa.String(100)),
        sa.Column("year", sa.Integer()),
        sa.Column("color", sa.String(50)),
        sa.Column("category", sa.String(50)),
        sa.Column("engine_number", sa.String(50), index=True),
        sa.Column("plate_number", sa.String(20), index=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("owners.id"), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "theft_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column("bike_id", sa.Integer(), sa.ForeignKey("bikes.id"), nullable=False),
        sa.Column("reported_by", sa.Integer(), sa.ForeignKey("owners.id"), nullable=False, index=True),
        sa.Column("theft_date", sa.DateTime(), nullable=False),
        sa.Column("theft_location", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("police_report", sa.String(100)),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_theft_reports_bike_status", "theft_reports", ["bike_id", "status"])

    op.create_table(
        "bike_images",
        sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column("bike_id", sa.Integer(), sa.ForeignKey("bikes.id"), nullable=False, index=True),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("filename", sa.String(255)),
        sa.Column("created_at", sa.DateTime()),
    )


def downgrade() -> None:
    op.drop_table("bike_images")
    op.drop_index("ix_theft_reports_bike_status", table_name="theft_reports")
    op.drop_table("theft_reports")
    op.drop_table("bikes")
    op.drop_table("owners")
