from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_service.exceptions import BusinessRuleViolationError, ValidationError
from library_service.models.book import Book, BookGenre

SORTABLE_FIELDS = {
    "id": Book.id,
    "isbn": Book.isbn,
    "title": Book.title,
    "author": Book.author,
    "genre": Book.genre,
    "publication_date": Book.publication_date,
    "available_copies": Book.available_copies,
    "total_copies": Book.total_copies,
    "created_at": Book.created_at,
}


def sort_clause(sort_by: str, sort_dir: str):
    column = SORTABLE_FIELDS.get(sort_by)
    if column is None:
        raise ValidationError(
            f"Invalid sort field '{sort_by}'",
            [f"Field 'sort_by': must be one of {', '.join(sorted(SORTABLE_FIELDS))}"],
        )
    direction = sort_dir.lower()
    if direction not in ("asc", "desc"):
        raise ValidationError(
            f"Invalid sort direction '{sort_dir}'",
            ["Field 'sort_dir': must be 'asc' or 'desc'"],
        )
    return column.asc() if direction == "asc" else column.desc()


class BookRepository:
    """Book catalog store."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, book_id: int) -> Book | None:
        return await self.session.get(Book, book_id)

    async def find_by_id_for_update(self, book_id: int) -> Book | None:
        """Load a book holding its row lock until the transaction ends."""
        result = await self.session.execute(
            select(Book)
            .where(Book.id == book_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_isbn(self, isbn: str) -> Book | None:
        result = await self.session.execute(select(Book).where(Book.isbn == isbn))
        return result.scalar_one_or_none()

    async def exists_by_id(self, book_id: int) -> bool:
        result = await self.session.execute(select(Book.id).where(Book.id == book_id))
        return result.scalar_one_or_none() is not None

    async def save(self, book: Book) -> Book:
        if book.available_copies < 0:
            raise BusinessRuleViolationError.negative_copies()
        if book.available_copies > book.total_copies:
            raise BusinessRuleViolationError.invalid_copy_counts(
                book.available_copies, book.total_copies
            )
        self.session.add(book)
        await self.session.flush()
        return book

    async def delete(self, book: Book) -> None:
        await self.session.delete(book)
        await self.session.flush()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Book))
        return result.scalar_one()

    async def count_available(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Book).where(Book.available_copies > 0)
        )
        return result.scalar_one()

    async def count_available_by_genre(self, genre: BookGenre) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Book)
            .where(Book.genre == genre, Book.available_copies > 0)
        )
        return result.scalar_one()

    async def find_with_borrowed_copies(self) -> Sequence[Book]:
        result = await self.session.execute(
            select(Book)
            .where(Book.available_copies < Book.total_copies)
            .order_by(Book.title)
        )
        return result.scalars().all()

    async def find_by_genre(self, genre: BookGenre) -> Sequence[Book]:
        result = await self.session.execute(
            select(Book).where(Book.genre == genre).order_by(Book.title)
        )
        return result.scalars().all()

    async def find_available(self) -> Sequence[Book]:
        result = await self.session.execute(
            select(Book).where(Book.available_copies > 0).order_by(Book.title)
        )
        return result.scalars().all()

    async def find_by_title_containing(self, title: str) -> Sequence[Book]:
        result = await self.session.execute(
            select(Book).where(Book.title.icontains(title, autoescape=True)).order_by(Book.title)
        )
        return result.scalars().all()

    async def find_by_author_containing(self, author: str) -> Sequence[Book]:
        result = await self.session.execute(
            select(Book).where(Book.author.icontains(author, autoescape=True)).order_by(Book.title)
        )
        return result.scalars().all()

    async def search(
        self,
        search_term: str | None,
        genre: BookGenre | None,
        available_only: bool,
        offset: int,
        limit: int,
        order_by,
    ) -> tuple[Sequence[Book], int]:
        filters = []
        if search_term:
            filters.append(
                or_(
                    Book.title.icontains(search_term, autoescape=True),
                    Book.author.icontains(search_term, autoescape=True),
                )
            )
        if genre is not None:
            filters.append(Book.genre == genre)
        if available_only:
            filters.append(Book.available_copies > 0)

        total = await self.session.execute(
            select(func.count()).select_from(Book).where(*filters)
        )
        result = await self.session.execute(
            select(Book)
            .where(*filters)
            .order_by(order_by, Book.id)
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all(), total.scalar_one()
