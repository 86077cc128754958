"""Borrow/return coordination over the book and borrow record stores.

Concurrency contract: ``borrow_book`` and ``return_book`` load the book with
``SELECT ... FOR UPDATE`` before checking it, and write the book and its
borrow record in the same transaction. Two requests for the same book
therefore serialize on the book row and can never both consume the last
copy. The partial unique index on active borrows backs up the
one-active-borrow-per-user rule at the database level.
"""
import logging
from datetime import date
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from library_service.config import settings
from library_service.exceptions import BusinessRuleViolationError, ResourceNotFoundError
from library_service.kafka.producer import InventoryEventPublisher, inventory_event
from library_service.models.book import Book
from library_service.models.borrow_record import BorrowRecord, BorrowStatus
from library_service.repositories.book import BookRepository
from library_service.repositories.borrow_record import BorrowRecordRepository
from library_service.repositories.user import UserRepository

logger = logging.getLogger(__name__)


def today() -> date:
    return date.today()


class InventoryService:
    def __init__(
        self,
        session: AsyncSession,
        publisher: InventoryEventPublisher | None = None,
        loan_period_days: int = settings.loan_period_days,
    ) -> None:
        self.session = session
        self.publisher = publisher
        self.loan_period_days = loan_period_days
        self.books = BookRepository(session)
        self.records = BorrowRecordRepository(session)
        self.users = UserRepository(session)

    async def borrow_book(
        self, user_id: int, book_id: int, on: date | None = None
    ) -> BorrowRecord:
        """Lend one copy of ``book_id`` to ``user_id``.

        Raises ResourceNotFoundError if the user or book does not exist and
        BusinessRuleViolationError if no copy is available or the user
        already holds this book.
        """
        on = on or today()
        logger.debug("User %s attempting to borrow book %s", user_id, book_id)
        try:
            await self._require_user(user_id)
            book = await self._lock_book(book_id)

            if not book.is_available():
                logger.warning("Book '%s' (ID: %s) is not available for borrowing", book.title, book_id)
                raise BusinessRuleViolationError.book_not_available(book.title)

            if await self.records.find_active(user_id, book_id) is not None:
                logger.warning("User %s already has book %s borrowed", user_id, book_id)
                raise BusinessRuleViolationError.already_borrowed()

            previous = book.available_copies
            book.borrow_copy()
            await self.books.save(book)
            record = await self.records.add(
                BorrowRecord(
                    user_id=user_id,
                    book=book,
                    borrow_date=on,
                    due_date=BorrowRecord.calculate_due_date(on, self.loan_period_days),
                    status=BorrowStatus.BORROWED,
                )
            )
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("Concurrent duplicate borrow of book %s by user %s rejected", book_id, user_id)
            raise BusinessRuleViolationError.already_borrowed() from exc
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User %s successfully borrowed book %s (due: %s)", user_id, book_id, record.due_date)
        await self._publish("BORROWED", record, previous, book.available_copies)
        return record

    async def return_book(
        self, user_id: int, book_id: int, on: date | None = None
    ) -> BorrowRecord:
        """Take back the copy of ``book_id`` held by ``user_id``."""
        on = on or today()
        logger.debug("User %s attempting to return book %s", user_id, book_id)
        try:
            await self._require_user(user_id)
            book = await self._lock_book(book_id)

            record = await self.records.find_active(user_id, book_id)
            if record is None:
                logger.warning("User %s has no active borrow of book %s", user_id, book_id)
                raise BusinessRuleViolationError.not_borrowed()

            previous = book.available_copies
            try:
                book.return_copy()
            except BusinessRuleViolationError as exc:
                logger.warning("Failed to return book '%s' (ID: %s): %s", book.title, book_id, exc)
                raise

            record.mark_returned(on)
            await self.books.save(book)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User %s returned book %s (overdue: %s). Available copies: %d",
            user_id, book_id, on > record.due_date, book.available_copies,
        )
        await self._publish("RETURNED", record, previous, book.available_copies)
        return record

    async def has_user_borrowed_book(self, user_id: int, book_id: int) -> bool:
        await self._require_user(user_id)
        if not await self.books.exists_by_id(book_id):
            raise ResourceNotFoundError.for_book(book_id)
        return await self.records.find_active(user_id, book_id) is not None

    async def get_user_borrow_records(
        self, user_id: int, page: int, size: int
    ) -> tuple[Sequence[BorrowRecord], int]:
        return await self.get_user_borrow_records_by_status(user_id, None, page, size)

    async def get_user_borrow_records_by_status(
        self, user_id: int, status: BorrowStatus | None, page: int, size: int
    ) -> tuple[Sequence[BorrowRecord], int]:
        await self._require_user(user_id)
        return await self.records.find_by_user(user_id, status, offset=page * size, limit=size)

    async def get_overdue_records(self, on: date | None = None) -> Sequence[BorrowRecord]:
        return await self.records.find_overdue(on or today())

    async def _require_user(self, user_id: int) -> None:
        if not await self.users.exists_by_id(user_id):
            logger.warning("User %s not found", user_id)
            raise ResourceNotFoundError.for_user(user_id)

    async def _lock_book(self, book_id: int) -> Book:
        book = await self.books.find_by_id_for_update(book_id)
        if book is None:
            logger.warning("Book %s not found", book_id)
            raise ResourceNotFoundError.for_book(book_id)
        return book

    async def _publish(self, action: str, record: BorrowRecord, previous: int, current: int) -> None:
        if self.publisher is not None:
            await self.publisher.publish(inventory_event(action, record, previous, current))
