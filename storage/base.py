"""
Abstract record store interface for book data.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from books_api.models import BookRecord


class BookStore(ABC):
    """
    Persistent collection of books.

    Identifiers are passed around as ObjectId hex strings. Implementations
    enforce (title, author) uniqueness themselves and raise DuplicateError
    on conflict; driver failures surface as StoreError.
    """

    async def connect(self) -> None:
        """Open the underlying connection."""

    async def disconnect(self) -> None:
        """Release the underlying connection."""

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Report store status."""

    @abstractmethod
    async def insert_book(self, fields: Dict[str, Any]) -> BookRecord:
        """Insert a book and return it with its generated identifier."""

    @abstractmethod
    async def find_all(self) -> List[BookRecord]:
        """Return every stored book."""

    @abstractmethod
    async def find_duplicate(
        self, title: str, author: str, exclude_id: Optional[str] = None
    ) -> Optional[BookRecord]:
        """Return a book holding (title, author), ignoring ``exclude_id``."""

    @abstractmethod
    async def find_by_id(self, book_id: str) -> Optional[BookRecord]:
        """Return the book with ``book_id`` or None."""

    @abstractmethod
    async def update_by_id(self, book_id: str, fields: Dict[str, Any]) -> Optional[BookRecord]:
        """Replace the book fields and return the updated book, or None."""

    @abstractmethod
    async def delete_by_id(self, book_id: str) -> bool:
        """Remove the book; False when nothing matched."""
