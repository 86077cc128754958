import enum
from datetime import date

from sqlalchemy import CheckConstraint, Date, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from library_service.exceptions import BusinessRuleViolationError
from library_service.models.base import Base, TimestampMixin


class BookGenre(str, enum.Enum):
    FICTION = "FICTION"
    NON_FICTION = "NON_FICTION"
    SCIENCE = "SCIENCE"
    TECHNOLOGY = "TECHNOLOGY"
    HISTORY = "HISTORY"
    BIOGRAPHY = "BIOGRAPHY"
    MYSTERY = "MYSTERY"
    ROMANCE = "ROMANCE"
    FANTASY = "FANTASY"

    @property
    def display_name(self) -> str:
        # NON_FICTION -> "Non-Fiction"
        return self.name.replace("_", "-").title()


class Book(TimestampMixin, Base):
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("total_copies >= 1", name="books_total_copies_check"),
        CheckConstraint("available_copies >= 0", name="books_available_copies_check"),
        CheckConstraint("available_copies <= total_copies", name="books_copies_logic_check"),
        Index("idx_books_title", "title"),
        Index("idx_books_author", "author"),
        Index("idx_books_genre", "genre"),
        Index("idx_books_available_copies", "available_copies"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    isbn: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    genre: Mapped[BookGenre] = mapped_column(
        Enum(BookGenre, native_enum=False, length=50),
        nullable=False,
    )
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    publication_date: Mapped[date | None] = mapped_column(Date)

    @property
    def borrowed_copies(self) -> int:
        return self.total_copies - self.available_copies

    def is_available(self) -> bool:
        return self.available_copies is not None and self.available_copies > 0

    def borrow_copy(self) -> None:
        if not self.is_available():
            raise BusinessRuleViolationError.book_not_available(self.title)
        self.available_copies -= 1

    def return_copy(self) -> None:
        if self.available_copies >= self.total_copies:
            raise BusinessRuleViolationError.all_copies_available(self.title)
        self.available_copies += 1
