"""create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(100), nullable=False, unique=True),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("role", sa.String(20), nullable=False, server_default="MEMBER"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True),
                  server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("role IN ('MEMBER', 'ADMIN')", name="users_role_check"),
        sa.CheckConstraint("length(first_name) > 0", name="users_first_name_check"),
        sa.CheckConstraint("length(last_name) > 0", name="users_last_name_check"),
    )
    op.create_index("idx_users_role", "users", ["role"])
    op.create_index("idx_users_name", "users", ["last_name", "first_name"])


def downgrade() -> None:
    op.drop_table("users")
