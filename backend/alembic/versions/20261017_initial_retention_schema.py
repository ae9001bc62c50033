"""Initial schema: orgs, tenant settings, threads, messages, model invocations, audit logs

Revision ID: initial_retention_schema
Revises:
Create Date: 2026-10-17

The (org_id, created_at) indexes back the batched retention selects;
messages.thread_id backs the NOT EXISTS check for threads without messages.
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic
revision = "initial_retention_schema"
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column("id", sa.Uuid(), primary_key=True)


def _created_at():
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "orgs",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        _created_at(),
    )
    op.create_index("ix_orgs_created_at", "orgs", ["created_at"])

    op.create_table(
        "org_members",
        _id(),
        sa.Column("org_id", sa.Uuid(), sa.ForeignKey("orgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        _created_at(),
        sa.UniqueConstraint("org_id", "user_id", name="uq_org_members_org_user"),
    )
    op.create_index("ix_org_members_org_id", "org_members", ["org_id"])
    op.create_index("ix_org_members_user_id", "org_members", ["user_id"])
    op.create_index("ix_org_members_created_at", "org_members", ["created_at"])

    op.create_table(
        "tenant_settings",
        sa.Column("org_id", sa.Uuid(), sa.ForeignKey("orgs.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("key", sa.String(64), primary_key=True),
        sa.Column("value", postgresql.JSONB(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )

    op.create_table(
        "threads",
        _id(),
        sa.Column("org_id", sa.Uuid(), sa.ForeignKey("orgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(255), nullable=True),
        _created_at(),
    )
    op.create_index("ix_threads_created_at", "threads", ["created_at"])
    op.create_index("idx_threads_org_created", "threads", ["org_id", "created_at"])

    op.create_table(
        "messages",
        _id(),
        sa.Column("org_id", sa.Uuid(), sa.ForeignKey("orgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "thread_id",
            sa.Uuid(),
            sa.ForeignKey("threads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("content_text", sa.Text(), nullable=True),
        sa.Column("model", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_messages_created_at", "messages", ["created_at"])
    op.create_index("ix_messages_thread_id", "messages", ["thread_id"])
    op.create_index("idx_messages_org_created", "messages", ["org_id", "created_at"])

    op.create_table(
        "model_invocations",
        _id(),
        sa.Column("org_id", sa.Uuid(), sa.ForeignKey("orgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "thread_id",
            sa.Uuid(),
            sa.ForeignKey("threads.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("prompt_tokens", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completion_tokens", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_model_invocations_created_at", "model_invocations", ["created_at"])
    op.create_index(
        "idx_model_invocations_org_created", "model_invocations", ["org_id", "created_at"]
    )

    op.create_table(
        "audit_logs",
        _id(),
        sa.Column("org_id", sa.Uuid(), sa.ForeignKey("orgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("target_type", sa.String(50), nullable=False),
        sa.Column("target_id", sa.String(255), nullable=True),
        sa.Column("content_sha256", sa.String(64), nullable=True),
        sa.Column("meta", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        _created_at(),
    )
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])
    op.create_index("idx_audit_logs_org_created", "audit_logs", ["org_id", "created_at"])
    op.create_index("idx_audit_logs_org_action", "audit_logs", ["org_id", "action", "created_at"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("model_invocations")
    op.drop_table("messages")
    op.drop_table("threads")
    op.drop_table("tenant_settings")
    op.drop_table("org_members")
    op.drop_table("orgs")
