"""seed users and books

Revision ID: 004
Revises: 003
Create Date: 2026-10-19

NOTE: development data only. The seeded passwords are admin123 / member123.
"""
from datetime import date

import bcrypt
from alembic import op
import sqlalchemy as sa

revision = "004"
down_revision = "003"
branch_labels = None
depends_on = None

USERS = [
    ("admin@library.com", "admin123", "Library", "Administrator", None, "ADMIN"),
    ("marcel.pulido@email.com", "member123", "Marcel", "Pulido", "555-0123", "MEMBER"),
    ("john.doe@email.com", "member123", "John", "Doe", "555-0124", "MEMBER"),
    ("jane.smith@email.com", "member123", "Jane", "Smith", "555-0125", "MEMBER"),
]

BOOKS = [
    ("9780134685991", "Effective Java", "Joshua Bloch", "TECHNOLOGY", 3, date(2017, 12, 27)),
    ("9781617294945", "Spring Boot in Action", "Craig Walls", "TECHNOLOGY", 2, date(2015, 12, 16)),
    ("9780135166307", "Clean Code", "Robert C. Martin", "TECHNOLOGY", 4, date(2008, 8, 1)),
    ("9780544003415", "The Lord of the Rings", "J.R.R. Tolkien", "FANTASY", 5, date(1954, 7, 29)),
    ("9780061120084", "To Kill a Mockingbird", "Harper Lee", "FICTION", 3, date(1960, 7, 11)),
    ("9780307387899", "The Road", "Cormac McCarthy", "FICTION", 2, date(2006, 9, 26)),
]


def _hash(raw: str) -> str:
    return bcrypt.hashpw(raw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def upgrade() -> None:
    users = sa.table(
        "users",
        sa.column("email", sa.String()),
        sa.column("password", sa.String()),
        sa.column("first_name", sa.String()),
        sa.column("last_name", sa.String()),
        sa.column("phone", sa.String()),
        sa.column("role", sa.String()),
    )
    op.bulk_insert(users, [
        {"email": e, "password": _hash(p), "first_name": f, "last_name": l, "phone": ph, "role": r}
        for e, p, f, l, ph, r in USERS
    ])

    books = sa.table(
        "books",
        sa.column("isbn", sa.String()),
        sa.column("title", sa.String()),
        sa.column("author", sa.String()),
        sa.column("genre", sa.String()),
        sa.column("total_copies", sa.Integer()),
        sa.column("available_copies", sa.Integer()),
        sa.column("publication_date", sa.Date()),
    )
    op.bulk_insert(books, [
        {"isbn": i, "title": t, "author": a, "genre": g,
         "total_copies": n, "available_copies": n, "publication_date": d}
        for i, t, a, g, n, d in BOOKS
    ])


def downgrade() -> None:
    op.execute("DELETE FROM books")
    op.execute("DELETE FROM users")
