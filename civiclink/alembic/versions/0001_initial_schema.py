"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ISSUE_STATUSES = ("pending", "in_progress", "resolved", "rejected")
ISSUE_CATEGORIES = ("roads", "lighting", "waste", "water", "parks", "safety", "other")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "issues",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.Enum(*ISSUE_CATEGORIES, name="issue_category"), nullable=False),
        sa.Column("photo_url", sa.String(length=1024), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("reporter_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.Enum(*ISSUE_STATUSES, name="issue_status"), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_issues")),
    )
    op.create_index(op.f("ix_issues_id"), "issues", ["id"])
    op.create_index(op.f("ix_issues_reporter_id"), "issues", ["reporter_id"])
    op.create_index(op.f("ix_issues_status"), "issues", ["status"])
    op.create_index(op.f("ix_issues_upvotes"), "issues", ["upvotes"])

    op.create_table(
        "issue_upvotes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("issue_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["issue_id"], ["issues.id"], name=op.f("fk_issue_upvotes_issue_id_issues"), ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_issue_upvotes")),
        sa.UniqueConstraint("issue_id", "user_id", name="unique_issue_voter"),
    )
    op.create_index(op.f("ix_issue_upvotes_id"), "issue_upvotes", ["id"])
    op.create_index(op.f("ix_issue_upvotes_issue_id"), "issue_upvotes", ["issue_id"])
    op.create_index(op.f("ix_issue_upvotes_user_id"), "issue_upvotes", ["user_id"])

    op.create_table(
        "issue_updates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("issue_id", sa.Uuid(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("status", postgresql.ENUM(*ISSUE_STATUSES, name="issue_status", create_type=False), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["issue_id"], ["issues.id"], name=op.f("fk_issue_updates_issue_id_issues"), ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_issue_updates")),
    )
    op.create_index(op.f("ix_issue_updates_id"), "issue_updates", ["id"])
    op.create_index(op.f("ix_issue_updates_issue_id"), "issue_updates", ["issue_id"])
    op.create_index(op.f("ix_issue_updates_author_id"), "issue_updates", ["author_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False, comment="Recipient"),
        sa.Column("issue_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["issue_id"], ["issues.id"], name=op.f("fk_notifications_issue_id_issues"), ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_notifications")),
    )
    op.create_index(op.f("ix_notifications_id"), "notifications", ["id"])
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"])
    op.create_index(op.f("ix_notifications_issue_id"), "notifications", ["issue_id"])
    op.create_index("ix_notifications_user_created", "notifications", ["user_id", "created_at"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("points", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_profiles")),
    )
    op.create_index(op.f("ix_profiles_id"), "profiles", ["id"])
    op.create_index(op.f("ix_profiles_points"), "profiles", ["points"])


def downgrade() -> None:
    op.drop_table("profiles")
    op.drop_table("notifications")
    op.drop_table("issue_updates")
    op.drop_table("issue_upvotes")
    op.drop_table("issues")
    sa.Enum(name="issue_status").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="issue_category").drop(op.get_bind(), checkfirst=True)
