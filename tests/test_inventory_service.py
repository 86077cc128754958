from datetime import date, timedelta

import pytest

from library_service.exceptions import BusinessRuleViolationError, ResourceNotFoundError
from library_service.models.book import Book
from library_service.models.borrow_record import BorrowRecord, BorrowStatus
from library_service.services.inventory import InventoryService


@pytest.fixture
def inventory(session_factory):
    """Run one InventoryService call in its own session, like one request."""
    async def _call(method: str, *args, **kwargs):
        async with session_factory() as session:
            return await getattr(InventoryService(session), method)(*args, **kwargs)
    return _call


async def test_borrow_then_return_scenario(inventory, make_book, member, load):
    book = await make_book(total_copies=5)

    record = await inventory("borrow_book", member.id, book.id)

    assert record.status == BorrowStatus.BORROWED
    assert record.borrow_date == date.today()
    assert record.due_date == date.today() + timedelta(days=7)
    assert record.return_date is None
    assert (await load(Book, book.id)).available_copies == 4

    returned = await inventory("return_book", member.id, book.id)

    assert returned.id == record.id
    assert returned.status == BorrowStatus.RETURNED
    assert returned.return_date == date.today()
    assert (await load(Book, book.id)).available_copies == 5


async def test_borrow_unknown_book_is_not_found(inventory, member):
    with pytest.raises(ResourceNotFoundError):
        await inventory("borrow_book", member.id, 999)


async def test_borrow_unknown_user_is_not_found(inventory, make_book):
    book = await make_book()
    with pytest.raises(ResourceNotFoundError):
        await inventory("borrow_book", 999, book.id)


async def test_borrow_without_available_copies_leaves_state_unchanged(inventory, make_book, member, load):
    book = await make_book(total_copies=2, available_copies=0)

    with pytest.raises(BusinessRuleViolationError, match="not available for borrowing"):
        await inventory("borrow_book", member.id, book.id)

    assert (await load(Book, book.id)).available_copies == 0
    records, total = await inventory("get_user_borrow_records", member.id, 0, 10)
    assert total == 0


async def test_availability_is_checked_before_duplicate_borrow(inventory, make_book, member):
    book = await make_book(total_copies=1)
    await inventory("borrow_book", member.id, book.id)

    # Sole copy is out, so the availability rule fires first.
    with pytest.raises(BusinessRuleViolationError, match="not available"):
        await inventory("borrow_book", member.id, book.id)


async def test_second_borrow_of_same_book_is_rejected(inventory, make_book, member, load):
    book = await make_book(total_copies=3)
    await inventory("borrow_book", member.id, book.id)

    with pytest.raises(BusinessRuleViolationError, match="already borrowed"):
        await inventory("borrow_book", member.id, book.id)

    assert (await load(Book, book.id)).available_copies == 2
    records, total = await inventory("get_user_borrow_records_by_status", member.id, BorrowStatus.BORROWED, 0, 10)
    assert total == 1


async def test_book_can_be_borrowed_again_after_return(inventory, make_book, member):
    book = await make_book(total_copies=1)
    await inventory("borrow_book", member.id, book.id)
    await inventory("return_book", member.id, book.id)

    again = await inventory("borrow_book", member.id, book.id)

    assert again.status == BorrowStatus.BORROWED
    records, total = await inventory("get_user_borrow_records", member.id, 0, 10)
    assert total == 2


async def test_return_without_active_borrow_is_rejected(inventory, make_book, member, load):
    book = await make_book(total_copies=3, available_copies=2)

    with pytest.raises(BusinessRuleViolationError, match="not borrowed"):
        await inventory("return_book", member.id, book.id)

    assert (await load(Book, book.id)).available_copies == 2


async def test_return_twice_is_rejected(inventory, make_book, member):
    book = await make_book()
    await inventory("borrow_book", member.id, book.id)
    await inventory("return_book", member.id, book.id)

    with pytest.raises(BusinessRuleViolationError, match="already been returned"):
        await inventory("return_book", member.id, book.id)


async def test_return_when_all_copies_available_is_rejected(session_factory, make_book, member, load):
    book = await make_book(total_copies=2)
    async with session_factory() as session:
        session.add(
            BorrowRecord(
                user_id=member.id,
                book_id=book.id,
                borrow_date=date.today(),
                due_date=date.today() + timedelta(days=7),
                status=BorrowStatus.BORROWED,
            )
        )
        await session.commit()

    async with session_factory() as session:
        with pytest.raises(BusinessRuleViolationError, match="all copies are already available"):
            await InventoryService(session).return_book(member.id, book.id)

    assert (await load(Book, book.id)).available_copies == 2
    async with session_factory() as session:
        assert await InventoryService(session).has_user_borrowed_book(member.id, book.id)


async def test_return_unknown_book_is_not_found(inventory, member):
    with pytest.raises(ResourceNotFoundError):
        await inventory("return_book", member.id, 12345)


async def test_has_user_borrowed_book(inventory, make_book, make_user, member):
    book = await make_book()
    other = await make_user()
    await inventory("borrow_book", member.id, book.id)

    assert await inventory("has_user_borrowed_book", member.id, book.id) is True
    assert await inventory("has_user_borrowed_book", other.id, book.id) is False

    with pytest.raises(ResourceNotFoundError):
        await inventory("has_user_borrowed_book", member.id, 404)


async def test_borrow_records_are_paginated_most_recent_first(inventory, make_book, member):
    books = [await make_book(title=f"Book {i}") for i in range(3)]
    for offset, book in enumerate(books):
        await inventory("borrow_book", member.id, book.id, on=date(2026, 1, 1) + timedelta(days=offset))
    await inventory("return_book", member.id, books[0].id)

    first_page, total = await inventory("get_user_borrow_records", member.id, 0, 2)
    assert total == 3
    assert [r.book.title for r in first_page] == ["Book 2", "Book 1"]

    second_page, _ = await inventory("get_user_borrow_records", member.id, 1, 2)
    assert [r.book.title for r in second_page] == ["Book 0"]

    returned, total = await inventory(
        "get_user_borrow_records_by_status", member.id, BorrowStatus.RETURNED, 0, 10
    )
    assert total == 1
    assert returned[0].book_id == books[0].id


async def test_borrow_records_for_unknown_user_is_not_found(inventory):
    with pytest.raises(ResourceNotFoundError):
        await inventory("get_user_borrow_records", 999, 0, 10)


async def test_overdue_records(inventory, make_book, member):
    old = await make_book(title="Old")
    fresh = await make_book(title="Fresh")
    await inventory("borrow_book", member.id, old.id, on=date(2026, 1, 1))
    await inventory("borrow_book", member.id, fresh.id, on=date(2026, 1, 20))

    overdue = await inventory("get_overdue_records", on=date(2026, 1, 21))

    assert [r.book_id for r in overdue] == [old.id]
    assert overdue[0].is_overdue(date(2026, 1, 21))


async def test_loan_period_is_configurable(session_factory, make_book, member):
    book = await make_book()
    async with session_factory() as session:
        record = await InventoryService(session, loan_period_days=14).borrow_book(
            member.id, book.id, on=date(2026, 3, 1)
        )
    assert record.due_date == date(2026, 3, 15)


class RecordingPublisher:
    def __init__(self):
        self.events = []

    async def publish(self, event):
        self.events.append(event)


async def test_committed_borrow_and_return_are_published(session_factory, make_book, member):
    book = await make_book(total_copies=2)
    publisher = RecordingPublisher()

    async with session_factory() as session:
        service = InventoryService(session, publisher)
        record = await service.borrow_book(member.id, book.id)
        await service.return_book(member.id, book.id)

    borrowed, returned = publisher.events
    assert borrowed["action"] == "BORROWED"
    assert borrowed["bookId"] == book.id
    assert borrowed["userId"] == member.id
    assert borrowed["borrowRecordId"] == record.id
    assert (borrowed["previousAvailable"], borrowed["newAvailable"]) == (2, 1)
    assert returned["action"] == "RETURNED"
    assert (returned["previousAvailable"], returned["newAvailable"]) == (1, 2)


async def test_rejected_borrow_is_not_published(session_factory, make_book, member):
    book = await make_book(total_copies=1, available_copies=0)
    publisher = RecordingPublisher()

    async with session_factory() as session:
        with pytest.raises(BusinessRuleViolationError):
            await InventoryService(session, publisher).borrow_book(member.id, book.id)

    assert publisher.events == []
