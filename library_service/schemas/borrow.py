from datetime import date

from pydantic import BaseModel

from library_service.models.borrow_record import BorrowRecord, BorrowStatus


class BorrowRecordResponse(BaseModel):
    id: int
    book_id: int
    book_title: str
    book_author: str
    book_isbn: str
    status: BorrowStatus
    borrow_date: date
    due_date: date
    return_date: date | None
    is_overdue: bool

    @classmethod
    def from_record(cls, record: BorrowRecord, today: date) -> "BorrowRecordResponse":
        return cls(
            id=record.id,
            book_id=record.book.id,
            book_title=record.book.title,
            book_author=record.book.author,
            book_isbn=record.book.isbn,
            status=record.status,
            borrow_date=record.borrow_date,
            due_date=record.due_date,
            return_date=record.return_date,
            is_overdue=record.is_overdue(today),
        )


class BorrowStatusResponse(BaseModel):
    borrowed: bool
