"""add email assets

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "email_assets",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("campaign_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("audience_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email_type", sa.String(length=50), nullable=False),
        sa.Column("version_strategy", sa.String(length=20), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("subject_line", sa.String(length=100), nullable=False),
        sa.Column("preheader", sa.String(length=150), nullable=False, server_default=""),
        sa.Column("headline", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("body_copy", sa.Text(), nullable=False),
        sa.Column("cta_text", sa.String(length=50), nullable=False),
        sa.Column("full_html", sa.Text(), nullable=False),
        sa.Column("inlined_html", sa.Text(), nullable=False),
        sa.Column("liquid_html", sa.Text(), nullable=True),
        sa.Column("plain_text", sa.Text(), nullable=False),
        sa.Column("brand_snapshot", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("audience_snapshot", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="generated"),
        sa.Column("template_id", sa.String(length=50), nullable=False, server_default="ai-generated"),
        sa.Column("generation_mode", sa.String(length=20), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("last_edited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("export_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tokens_used", sa.Integer(), nullable=True),
        sa.Column("extraction_confident", sa.Boolean(), nullable=True),
        sa.Column("edit_history", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["audience_id"], ["audiences.id"]),
        sa.CheckConstraint("version_number >= 1 AND version_number <= 4", name="ck_email_assets_version_number"),
    )
    op.create_index("ix_email_assets_campaign_audience", "email_assets", ["campaign_id", "audience_id"])
    op.create_index("ix_email_assets_user_status", "email_assets", ["user_id", "status"])


def downgrade():
    op.drop_index("ix_email_assets_user_status", table_name="email_assets")
    op.drop_index("ix_email_assets_campaign_audience", table_name="email_assets")
    op.drop_table("email_assets")
