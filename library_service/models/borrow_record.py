import enum
from datetime import date, timedelta

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_service.models.base import Base, TimestampMixin
from library_service.models.book import Book


class BorrowStatus(str, enum.Enum):
    BORROWED = "BORROWED"
    RETURNED = "RETURNED"


_ACTIVE = text("status = 'BORROWED'")


class BorrowRecord(TimestampMixin, Base):
    __tablename__ = "borrow_records"
    __table_args__ = (
        CheckConstraint("due_date >= borrow_date", name="chk_dates"),
        CheckConstraint(
            "return_date IS NULL OR return_date >= borrow_date",
            name="chk_return_date",
        ),
        Index("idx_borrow_user_id", "user_id"),
        Index("idx_borrow_book_id", "book_id"),
        Index("idx_borrow_user_status_due", "user_id", "status", "due_date"),
        # One active borrow per (user, book).
        Index(
            "idx_unique_active_borrow",
            "user_id",
            "book_id",
            unique=True,
            postgresql_where=_ACTIVE,
            sqlite_where=_ACTIVE,
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"), nullable=False
    )
    borrow_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[BorrowStatus] = mapped_column(
        Enum(BorrowStatus, native_enum=False, length=20),
        nullable=False,
    )

    book: Mapped[Book] = relationship(lazy="joined", innerjoin=True)

    @staticmethod
    def calculate_due_date(borrow_date: date, loan_period_days: int = 7) -> date:
        """Calendar days, weekends included."""
        return borrow_date + timedelta(days=loan_period_days)

    def is_overdue(self, today: date) -> bool:
        return self.status == BorrowStatus.BORROWED and today > self.due_date

    def mark_returned(self, today: date) -> None:
        self.return_date = today
        self.status = BorrowStatus.RETURNED
