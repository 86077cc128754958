from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from library_service.models.book import BookGenre


class BookRequest(BaseModel):
    isbn: str = Field(min_length=10, max_length=20)
    title: str = Field(min_length=1, max_length=200)
    author: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    genre: BookGenre
    total_copies: int = Field(default=1, ge=1)
    available_copies: int | None = Field(default=None, ge=0)
    publication_date: date

    @field_validator("isbn", "title", "author")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("publication_date")
    @classmethod
    def not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("publication date cannot be in the future")
        return value


class BookResponse(BaseModel):
    id: int
    title: str
    author: str
    description: str | None
    genre: BookGenre
    available_copies: int
    publication_date: date | None

    model_config = {"from_attributes": True}


class BookAdminResponse(BookResponse):
    isbn: str
    total_copies: int
    created_at: datetime | None
    updated_at: datetime | None
