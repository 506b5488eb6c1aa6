"""
Book operations: validation, duplicate checks and store calls.
"""

from typing import List

import structlog
from bson import ObjectId

from books_api.errors import (
    DUPLICATE_BOOK_MESSAGE,
    DuplicateError,
    EmptyCollectionError,
    MalformedIdError,
    NotFoundError,
    ValidationError,
)
from books_api.models import BookInput, BookRecord
from storage.base import BookStore

logger = structlog.get_logger(__name__)


class BookService:
    """CRUD operations on the book catalogue."""

    def __init__(self, store: BookStore, empty_collection_not_found: bool = True):
        self.store = store
        self.empty_collection_not_found = empty_collection_not_found

    @staticmethod
    def _validate(book: BookInput) -> None:
        missing = book.missing_fields()
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    @staticmethod
    def _check_id(book_id: str) -> None:
        if not ObjectId.is_valid(book_id):
            raise MalformedIdError(f"Invalid book id: {book_id}")

    async def create_book(self, book: BookInput) -> BookRecord:
        """
        Create a book after checking no other book has its title and author.

        Args:
            book: Request body

        Returns:
            The stored book including its generated identifier
        """
        self._validate(book)

        existing = await self.store.find_duplicate(book.title, book.author)
        if existing is not None:
            logger.warning("Duplicate book rejected", title=book.title, author=book.author,
                           existing_id=existing.id)
            raise DuplicateError(DUPLICATE_BOOK_MESSAGE)

        created = await self.store.insert_book(book.to_document())
        logger.info("Book created", book_id=created.id, title=created.title)
        return created

    async def list_books(self) -> List[BookRecord]:
        """Return every book; an empty catalogue is an error unless configured otherwise."""
        books = await self.store.find_all()
        if not books and self.empty_collection_not_found:
            raise EmptyCollectionError("No books found")
        return books

    async def get_book(self, book_id: str) -> BookRecord:
        """Look up one book by identifier."""
        self._check_id(book_id)

        book = await self.store.find_by_id(book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    async def update_book(self, book_id: str, book: BookInput) -> BookRecord:
        """
        Replace title, author and publishedYear of an existing book.

        The (title, author) pair may stay the same; it must not match a
        different book.

        Args:
            book_id: Identifier of the book to update
            book: Request body

        Returns:
            The book after the update
        """
        self._validate(book)
        self._check_id(book_id)

        conflict = await self.store.find_duplicate(book.title, book.author, exclude_id=book_id)
        if conflict is not None:
            logger.warning("Update conflicts with existing book", book_id=book_id,
                           existing_id=conflict.id)
            raise DuplicateError(DUPLICATE_BOOK_MESSAGE)

        updated = await self.store.update_by_id(book_id, book.to_document())
        if updated is None:
            raise NotFoundError("Book not found")

        logger.info("Book updated", book_id=book_id)
        return updated

    async def delete_book(self, book_id: str) -> None:
        """Remove a book by identifier."""
        self._check_id(book_id)

        if not await self.store.delete_by_id(book_id):
            raise NotFoundError("Book not found")
        logger.info("Book deleted", book_id=book_id)
