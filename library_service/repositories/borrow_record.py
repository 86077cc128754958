from datetime import date
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_service.models.borrow_record import BorrowRecord, BorrowStatus


class BorrowRecordRepository:
    """Borrow record store. Records are never deleted."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, record: BorrowRecord) -> BorrowRecord:
        self.session.add(record)
        await self.session.flush()
        return record

    async def find_active(self, user_id: int, book_id: int) -> BorrowRecord | None:
        result = await self.session.execute(
            select(BorrowRecord).where(
                BorrowRecord.user_id == user_id,
                BorrowRecord.book_id == book_id,
                BorrowRecord.status == BorrowStatus.BORROWED,
            )
        )
        return result.scalar_one_or_none()

    async def find_by_user(
        self,
        user_id: int,
        status: BorrowStatus | None,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[BorrowRecord], int]:
        filters = [BorrowRecord.user_id == user_id]
        if status is not None:
            filters.append(BorrowRecord.status == status)

        total = await self.session.execute(
            select(func.count()).select_from(BorrowRecord).where(*filters)
        )
        # Most recent first; id breaks ties between same-day borrows.
        result = await self.session.execute(
            select(BorrowRecord)
            .where(*filters)
            .order_by(BorrowRecord.borrow_date.desc(), BorrowRecord.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all(), total.scalar_one()

    async def find_overdue(self, today: date) -> Sequence[BorrowRecord]:
        result = await self.session.execute(
            select(BorrowRecord)
            .where(
                BorrowRecord.status == BorrowStatus.BORROWED,
                BorrowRecord.due_date < today,
            )
            .order_by(BorrowRecord.due_date, BorrowRecord.id)
        )
        return result.scalars().all()
