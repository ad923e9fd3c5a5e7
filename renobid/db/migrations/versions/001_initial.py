"""Initial schema - users, rankings, projects, bids, notifications

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("is_deleted", sa.Boolean, server_default=sa.text("false"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="homeowner"),
        sa.Column("is_active", sa.Boolean, server_default=sa.text("true"), nullable=False),
        sa.Column("preferences", postgresql.JSONB, nullable=True),
        sa.Column("verification_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("rating", sa.Float, nullable=False, server_default="0"),
        sa.Column("total_projects", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "contractor_rankings",
        *_base_columns(),
        sa.Column("contractor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("completed_projects", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_score", sa.Float, nullable=False, server_default="0"),
    )

    op.create_table(
        "projects",
        *_base_columns(),
        sa.Column("code", sa.String(20), nullable=False, unique=True),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("bid_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_bids", sa.Integer, nullable=False, server_default="20"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "bids",
        *_base_columns(),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False, index=True),
        sa.Column("contractor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("price", sa.Numeric(15, 2), nullable=False),
        sa.Column("timeline", sa.String(255), nullable=False),
        sa.Column("proposal", sa.Text, nullable=False),
        sa.Column("attachments", postgresql.JSONB, nullable=True),
        sa.Column("response_time_hours", sa.Float, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_note", sa.Text, nullable=True),
        sa.UniqueConstraint("code", name="uq_bids_code"),
    )
    op.create_index("ix_bids_project_status", "bids", ["project_id", "status"])
    op.create_index(
        "uq_bids_active_project_contractor",
        "bids",
        ["project_id", "contractor_id"],
        unique=True,
        postgresql_where=sa.text("status NOT IN ('withdrawn', 'rejected')"),
    )

    op.create_table(
        "notifications",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=True, index=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_read", sa.Boolean, server_default=sa.text("false"), nullable=False),
        sa.Column("action_url", sa.String(500), nullable=True),
        sa.Column("metadata_json", postgresql.JSONB, nullable=True),
        sa.Column("channel", sa.String(20), server_default="in_app", nullable=False),
    )


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_index("uq_bids_active_project_contractor", table_name="bids")
    op.drop_index("ix_bids_project_status", table_name="bids")
    op.drop_table("bids")
    op.drop_table("projects")
    op.drop_table("contractor_rankings")
    op.drop_table("users")
