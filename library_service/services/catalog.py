import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from library_service.exceptions import (
    BusinessRuleViolationError,
    DuplicateResourceError,
    ResourceNotFoundError,
)
from library_service.models.book import Book, BookGenre
from library_service.repositories.book import BookRepository, sort_clause
from library_service.schemas.book import BookRequest

logger = logging.getLogger(__name__)


class CatalogService:
    """Book CRUD and search."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.books = BookRepository(session)

    async def create_book(self, request: BookRequest) -> Book:
        logger.info("Creating new book with ISBN: %s", request.isbn)

        if await self.books.find_by_isbn(request.isbn) is not None:
            logger.warning("Attempted to create book with duplicate ISBN: %s", request.isbn)
            raise DuplicateResourceError.for_book_isbn(request.isbn)
        if request.total_copies < 1:
            raise BusinessRuleViolationError.minimum_copies_required()

        available = request.total_copies if request.available_copies is None else request.available_copies
        book = Book(
            isbn=request.isbn,
            title=request.title,
            author=request.author,
            description=request.description,
            genre=request.genre,
            total_copies=request.total_copies,
            available_copies=available,
            publication_date=request.publication_date,
        )
        try:
            await self.books.save(book)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Book created successfully with ID: %s and title: '%s'", book.id, book.title)
        return book

    async def get_book(self, book_id: int) -> Book:
        book = await self.books.find_by_id(book_id)
        if book is None:
            logger.debug("Book not found with ID: %s", book_id)
            raise ResourceNotFoundError.for_book(book_id)
        return book

    async def get_book_by_isbn(self, isbn: str) -> Book:
        book = await self.books.find_by_isbn(isbn)
        if book is None:
            logger.debug("Book not found with ISBN: %s", isbn)
            raise ResourceNotFoundError.for_book_isbn(isbn)
        return book

    async def update_book(self, book_id: int, request: BookRequest) -> Book:
        """Replace a book's fields.

        Without an explicit ``available_copies`` the number of borrowed
        copies is preserved across a change of ``total_copies``.
        """
        logger.info("Updating book with ID: %s", book_id)
        try:
            book = await self.books.find_by_id_for_update(book_id)
            if book is None:
                logger.warning("Attempted to update non-existent book with ID: %s", book_id)
                raise ResourceNotFoundError.for_book(book_id)

            if request.isbn != book.isbn and await self.books.find_by_isbn(request.isbn) is not None:
                raise DuplicateResourceError.for_book_isbn(request.isbn)

            borrowed = book.borrowed_copies
            if request.available_copies is None:
                if request.total_copies < borrowed:
                    raise BusinessRuleViolationError.copies_below_borrowed(borrowed, request.total_copies)
                available = request.total_copies - borrowed
            else:
                if request.available_copies > request.total_copies:
                    raise BusinessRuleViolationError.invalid_copy_counts(
                        request.available_copies, request.total_copies
                    )
                available = request.available_copies

            book.isbn = request.isbn
            book.title = request.title
            book.author = request.author
            book.description = request.description
            book.genre = request.genre
            book.total_copies = request.total_copies
            book.available_copies = available
            book.publication_date = request.publication_date

            await self.books.save(book)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Book updated successfully: %s", book.title)
        return book

    async def delete_book(self, book_id: int) -> None:
        logger.info("Attempting to delete book with ID: %s", book_id)
        try:
            book = await self.books.find_by_id_for_update(book_id)
            if book is None:
                logger.warning("Attempted to delete non-existent book with ID: %s", book_id)
                raise ResourceNotFoundError.for_book(book_id)

            if book.available_copies < book.total_copies:
                logger.warning(
                    "Cannot delete book with borrowed copies. Book: %s, Available: %d, Total: %d",
                    book.title, book.available_copies, book.total_copies,
                )
                raise BusinessRuleViolationError.borrowed_copies_on_delete(book.title)

            title = book.title
            await self.books.delete(book)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Book deleted successfully: %s", title)

    async def search_books(
        self,
        search_term: str | None,
        genre: BookGenre | None,
        available_only: bool,
        page: int,
        size: int,
        sort_by: str = "title",
        sort_dir: str = "asc",
    ) -> tuple[Sequence[Book], int]:
        logger.debug(
            "Searching books - term: '%s', genre: %s, availableOnly: %s, page: %d",
            search_term, genre, available_only, page,
        )
        return await self.books.search(
            search_term,
            genre,
            available_only,
            offset=page * size,
            limit=size,
            order_by=sort_clause(sort_by, sort_dir),
        )

    async def find_books_by_genre(self, genre: BookGenre) -> Sequence[Book]:
        return await self.books.find_by_genre(genre)

    async def find_available_books(self) -> Sequence[Book]:
        return await self.books.find_available()

    async def find_books_by_title(self, title: str) -> Sequence[Book]:
        return await self.books.find_by_title_containing(title)

    async def find_books_by_author(self, author: str) -> Sequence[Book]:
        return await self.books.find_by_author_containing(author)
