import asyncio

from library_service.exceptions import BusinessRuleViolationError
from library_service.models.book import Book
from library_service.services.inventory import InventoryService


async def _borrow(session_factory, user_id, book_id):
    async with session_factory() as session:
        try:
            await InventoryService(session).borrow_book(user_id, book_id)
        except BusinessRuleViolationError as exc:
            return exc
    return None


async def test_concurrent_borrows_never_oversell(session_factory, make_book, make_user, load):
    book = await make_book(total_copies=3)
    users = [await make_user() for _ in range(8)]

    outcomes = await asyncio.gather(
        *(_borrow(session_factory, u.id, book.id) for u in users)
    )

    failures = [o for o in outcomes if o is not None]
    assert len(failures) == 5
    assert all("not available" in f.message for f in failures)
    assert (await load(Book, book.id)).available_copies == 0

    borrowed = 0
    for user in users:
        async with session_factory() as session:
            borrowed += await InventoryService(session).has_user_borrowed_book(user.id, book.id)
    assert borrowed == 3


async def test_concurrent_duplicate_borrow_by_one_user(session_factory, make_book, member, load):
    book = await make_book(total_copies=5)

    outcomes = await asyncio.gather(
        *(_borrow(session_factory, member.id, book.id) for _ in range(4))
    )

    assert sum(o is None for o in outcomes) == 1
    assert all("already borrowed" in o.message for o in outcomes if o is not None)
    assert (await load(Book, book.id)).available_copies == 4


async def test_concurrent_borrow_and_return_keep_counts_consistent(session_factory, make_book, make_user, load):
    book = await make_book(total_copies=2)
    holders = [await make_user() for _ in range(2)]
    for user in holders:
        assert await _borrow(session_factory, user.id, book.id) is None

    async def _return(user_id):
        async with session_factory() as session:
            await InventoryService(session).return_book(user_id, book.id)

    newcomers = [await make_user() for _ in range(2)]
    await asyncio.gather(
        *(_return(u.id) for u in holders),
        *(_borrow(session_factory, u.id, book.id) for u in newcomers),
    )

    final = await load(Book, book.id)
    assert 0 <= final.available_copies <= final.total_copies
    active = 0
    for user in holders + newcomers:
        async with session_factory() as session:
            active += await InventoryService(session).has_user_borrowed_book(user.id, book.id)
    assert final.available_copies == final.total_copies - active
