"""Add campaigns attached to applications.

Revision ID: 0002_campaigns
Revises: 0001_init_schema
Create Date: 2026-09-15 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_campaigns"
down_revision = "0001_init_schema"
branch_labels = None
depends_on = None

campaign_type = sa.Enum("MAX_TOTAL", "DATE_VALIDITY", "BOTH", name="campaign_type")


def upgrade() -> None:
    op.create_table(
        "campaigns",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("campaign_type", campaign_type, nullable=False, server_default="BOTH"),
        sa.Column("max_number", sa.Integer(), nullable=True),
        sa.Column("campaign_last_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("app_id", sa.String(length=64), sa.ForeignKey("applications.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_campaigns_app_id", "campaigns", ["app_id"])


def downgrade() -> None:
    op.drop_index("ix_campaigns_app_id", table_name="campaigns")
    op.drop_table("campaigns")
    campaign_type.drop(op.get_bind(), checkfirst=True)
