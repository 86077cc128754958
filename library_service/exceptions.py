"""Library error taxonomy.

Every error carries an ``error_code`` and an HTTP status; the handlers in
``library_service.api.errors`` turn them into the JSON error body.
"""
from datetime import datetime, timezone

from fastapi import status


class LibraryError(Exception):
    error_code = "LIBRARY_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.timestamp = datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error_code={self.error_code!r}, "
            f"message={self.message!r}, details={self.details!r})"
        )


class ResourceNotFoundError(LibraryError):
    error_code = "RESOURCE_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    @classmethod
    def for_book(cls, book_id: int) -> "ResourceNotFoundError":
        return cls(f"Book with ID {book_id} not found")

    @classmethod
    def for_book_isbn(cls, isbn: str) -> "ResourceNotFoundError":
        return cls(f"Book with ISBN {isbn} not found")

    @classmethod
    def for_user(cls, user_id: int) -> "ResourceNotFoundError":
        return cls(f"User with ID {user_id} not found")


class BusinessRuleViolationError(LibraryError):
    error_code = "BUSINESS_RULE_VIOLATION"
    status_code = 422

    @classmethod
    def book_not_available(cls, title: str) -> "BusinessRuleViolationError":
        return cls(f"Book '{title}' is not available for borrowing")

    @classmethod
    def already_borrowed(cls) -> "BusinessRuleViolationError":
        return cls("You have already borrowed this book")

    @classmethod
    def not_borrowed(cls) -> "BusinessRuleViolationError":
        return cls("You have not borrowed this book or it has already been returned")

    @classmethod
    def all_copies_available(cls, title: str) -> "BusinessRuleViolationError":
        return cls(f"Cannot return book '{title}': all copies are already available")

    @classmethod
    def borrowed_copies_on_delete(cls, title: str) -> "BusinessRuleViolationError":
        return cls(
            f"Cannot delete book '{title}' with borrowed copies. "
            "Please ensure all copies are returned first."
        )

    @classmethod
    def invalid_copy_counts(cls, available: int, total: int) -> "BusinessRuleViolationError":
        return cls(f"Available copies ({available}) cannot exceed total copies ({total})")

    @classmethod
    def negative_copies(cls) -> "BusinessRuleViolationError":
        return cls("Available copies cannot be negative")

    @classmethod
    def minimum_copies_required(cls) -> "BusinessRuleViolationError":
        return cls("Total copies must be at least 1")

    @classmethod
    def copies_below_borrowed(cls, borrowed: int, new_total: int) -> "BusinessRuleViolationError":
        return cls(
            f"Cannot set total copies to {new_total} when {borrowed} copies are currently borrowed"
        )


class DuplicateResourceError(LibraryError):
    error_code = "DUPLICATE_RESOURCE"
    status_code = status.HTTP_409_CONFLICT

    @classmethod
    def for_book_isbn(cls, isbn: str) -> "DuplicateResourceError":
        return cls(f"Book with ISBN {isbn} already exists")

    @classmethod
    def for_user_email(cls, email: str) -> "DuplicateResourceError":
        return cls(f"User with email {email} already exists")


class ValidationError(LibraryError):
    error_code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, validation_errors: list[str] | None = None):
        super().__init__(message)
        self.validation_errors = validation_errors or []


class AuthenticationError(LibraryError):
    error_code = "AUTHENTICATION_FAILED"
    status_code = status.HTTP_401_UNAUTHORIZED

    @classmethod
    def invalid_credentials(cls) -> "AuthenticationError":
        # Same message for unknown email and bad password.
        return cls("Invalid email or password")


class AccessDeniedError(LibraryError):
    error_code = "ACCESS_DENIED"
    status_code = status.HTTP_403_FORBIDDEN
