"""create borrow_records table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "003"
down_revision = "002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "borrow_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("book_id", sa.Integer(),
                  sa.ForeignKey("books.id", ondelete="CASCADE"), nullable=False),
        sa.Column("borrow_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("return_date", sa.Date()),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True),
                  server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("status IN ('BORROWED', 'RETURNED')", name="chk_status"),
        sa.CheckConstraint("due_date >= borrow_date", name="chk_dates"),
        sa.CheckConstraint(
            "return_date IS NULL OR return_date >= borrow_date", name="chk_return_date"
        ),
    )
    op.create_index("idx_borrow_user_id", "borrow_records", ["user_id"])
    op.create_index("idx_borrow_book_id", "borrow_records", ["book_id"])
    op.create_index("idx_borrow_user_status_due", "borrow_records", ["user_id", "status", "due_date"])
    # One active borrow per (user, book).
    op.create_index(
        "idx_unique_active_borrow",
        "borrow_records",
        ["user_id", "book_id"],
        unique=True,
        postgresql_where=sa.text("status = 'BORROWED'"),
        sqlite_where=sa.text("status = 'BORROWED'"),
    )


def downgrade() -> None:
    op.drop_table("borrow_records")
