import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from library_service.models.book import Book, BookGenre
from library_service.repositories.book import BookRepository

logger = logging.getLogger(__name__)


def availability_percentage(available: int, total: int) -> float:
    """Share of available books in percent, rounded half-up to 2 places."""
    if total <= 0:
        return 0.0
    percentage = Decimal(available) * 100 / Decimal(total)
    return float(percentage.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class StatisticsService:
    """Read-only aggregates over the book catalog."""

    def __init__(self, session: AsyncSession) -> None:
        self.books = BookRepository(session)

    async def count_all_books(self) -> int:
        logger.debug("Counting all books")
        return await self.books.count()

    async def count_available_books(self) -> int:
        logger.debug("Counting available books")
        return await self.books.count_available()

    async def count_available_books_by_genre(self, genre: BookGenre) -> int:
        logger.debug("Counting available books by genre: %s", genre.value)
        return await self.books.count_available_by_genre(genre)

    async def get_books_with_borrowed_copies(self) -> Sequence[Book]:
        logger.debug("Finding books with borrowed copies")
        return await self.books.find_with_borrowed_copies()

    async def get_availability_percentage(self) -> float:
        total = await self.count_all_books()
        available = await self.count_available_books()
        percentage = availability_percentage(available, total)
        logger.debug("Book availability percentage: %s%%", percentage)
        return percentage
