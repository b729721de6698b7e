"""Initial schema: accounts, user_roles, complaints, contacts

Revision ID: 202610180001
Revises:
Create Date: 2026-10-18 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610180001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("user", "moderator", "admin", name="user_role")
complaint_status_enum = sa.Enum("pending", "resolved", name="complaint_status")


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("institution", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        _created_at(),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    op.create_table(
        "user_roles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "account_ref",
            sa.String(length=36),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("assigned_by", sa.String(length=36), nullable=True),
        _created_at(),
        sa.UniqueConstraint("account_ref", name="uq_user_roles_account_ref"),
    )

    op.create_table(
        "complaints",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", complaint_status_enum, nullable=False, server_default="pending"),
        _created_at(),
        sa.Column("admin_reply", sa.Text(), nullable=True),
        sa.Column("replied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("replied_by", sa.String(length=36), nullable=True),
        # Reply fields are all set or all empty
        sa.CheckConstraint(
            "(status = 'pending' AND admin_reply IS NULL AND replied_at IS NULL "
            "AND replied_by IS NULL) OR (status = 'resolved' AND admin_reply IS NOT NULL "
            "AND replied_at IS NOT NULL AND replied_by IS NOT NULL)",
            name="ck_complaints_reply_fields",
        ),
    )
    op.create_index("ix_complaints_status", "complaints", ["status"])

    op.create_table(
        "contacts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        _created_at(),
    )


def downgrade() -> None:
    op.drop_table("contacts")
    op.drop_index("ix_complaints_status", "complaints")
    op.drop_table("complaints")
    op.drop_table("user_roles")
    op.drop_index("ix_accounts_email", "accounts")
    op.drop_table("accounts")
    complaint_status_enum.drop(op.get_bind(), checkfirst=True)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
