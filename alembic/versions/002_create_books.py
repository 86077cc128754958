"""create books table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None

GENRES = (
    "FICTION", "NON_FICTION", "SCIENCE", "TECHNOLOGY",
    "HISTORY", "BIOGRAPHY", "MYSTERY", "ROMANCE", "FANTASY",
)


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("isbn", sa.String(20), nullable=False, unique=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("author", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("genre", sa.String(50), nullable=False),
        sa.Column("total_copies", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("available_copies", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("publication_date", sa.Date()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True),
                  server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("length(isbn) >= 10 AND length(isbn) <= 20", name="books_isbn_check"),
        sa.CheckConstraint(
            "genre IN (" + ", ".join(f"'{g}'" for g in GENRES) + ")",
            name="books_genre_check",
        ),
        sa.CheckConstraint("total_copies >= 1", name="books_total_copies_check"),
        sa.CheckConstraint("available_copies >= 0", name="books_available_copies_check"),
        sa.CheckConstraint("available_copies <= total_copies", name="books_copies_logic_check"),
    )
    op.create_index("idx_books_title", "books", ["title"])
    op.create_index("idx_books_author", "books", ["author"])
    op.create_index("idx_books_genre", "books", ["genre"])
    op.create_index("idx_books_available_copies", "books", ["available_copies"])


def downgrade() -> None:
    op.drop_table("books")
