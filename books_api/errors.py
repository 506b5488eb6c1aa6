"""
Error taxonomy for book operations.

Every error carries the HTTP status it maps to, so the application can
render all of them through a single exception handler.
"""

from typing import Optional

from fastapi import status


class BookAPIError(Exception):
    """Base class for errors raised by book operations."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(BookAPIError):
    """Required book fields are missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateError(BookAPIError):
    """Another book already holds the same title and author."""

    status_code = status.HTTP_400_BAD_REQUEST


class MalformedIdError(BookAPIError):
    """The identifier is not a valid ObjectId."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookAPIError):
    """No book matches the identifier."""

    status_code = status.HTTP_404_NOT_FOUND


class EmptyCollectionError(NotFoundError):
    """The catalogue holds no books."""


class StoreError(BookAPIError):
    """The record store failed."""


DUPLICATE_BOOK_MESSAGE = "A book with this title and author already exists"
