import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-library-service-tests")

from datetime import date
from itertools import count

import bcrypt
import pytest
from httpx import ASGITransport, AsyncClient

from library_service.database import build_engine, build_sessionmaker, get_db
from library_service.main import app
from library_service.models.base import Base
from library_service.models.book import Book, BookGenre
from library_service.models.borrow_record import BorrowRecord  # noqa: F401  registers the table
from library_service.models.user import User, UserRole
from library_service.security import create_access_token

_isbn_seq = count(9780000000001)
_email_seq = count(1)

TEST_PASSWORD = "password123"


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'library.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
def make_book(session_factory):
    async def _make(**fields) -> Book:
        values = {
            "isbn": str(next(_isbn_seq)),
            "title": "Clean Code",
            "author": "Robert C. Martin",
            "genre": BookGenre.TECHNOLOGY,
            "total_copies": 5,
            "publication_date": date(2008, 8, 1),
        }
        values.update(fields)
        values.setdefault("available_copies", values["total_copies"])
        async with session_factory() as session:
            book = Book(**values)
            session.add(book)
            await session.commit()
            return book
    return _make


@pytest.fixture
def make_user(session_factory):
    async def _make(role: UserRole = UserRole.MEMBER, password: str | None = None, **fields) -> User:
        n = next(_email_seq)
        values = {
            "email": f"user{n}@example.com",
            "first_name": "Test",
            "last_name": f"User{n}",
            "role": role,
            # Cheap hash; only login tests need a real one.
            "password": bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode() if password else "!",
        }
        values.update(fields)
        async with session_factory() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            return user
    return _make


@pytest.fixture
def load(session_factory):
    """Fetch a fresh copy of a row in a short-lived session."""
    async def _load(model, pk):
        async with session_factory() as session:
            return await session.get(model, pk)
    return _load


@pytest.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict[str, str]:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def member(make_user):
    return await make_user()


@pytest.fixture
async def admin(make_user):
    return await make_user(role=UserRole.ADMIN)

