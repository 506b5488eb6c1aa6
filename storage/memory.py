"""
In-process record store.

Used for local development (STORE_BACKEND=memory) and as the injected store
in tests. Each operation completes without yielding to the event loop, so
the uniqueness check and the write happen atomically.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId

from books_api.errors import DUPLICATE_BOOK_MESSAGE, DuplicateError
from books_api.models import BookRecord
from storage.base import BookStore

logger = structlog.get_logger(__name__)


class InMemoryBookStore(BookStore):
    """Book store backed by a dict keyed by ObjectId."""

    def __init__(self):
        self._documents: Dict[ObjectId, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._documents)

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "books_collection": "in-memory",
            "books_count": len(self._documents),
        }

    def _conflicting(self, title: str, author: str, exclude: Optional[ObjectId] = None) -> Optional[Dict[str, Any]]:
        for oid, document in self._documents.items():
            if oid == exclude:
                continue
            if document["title"] == title and document["author"] == author:
                return document
        return None

    async def insert_book(self, fields: Dict[str, Any]) -> BookRecord:
        if self._conflicting(fields["title"], fields["author"]) is not None:
            logger.warning("Book already exists", title=fields["title"], author=fields["author"])
            raise DuplicateError(DUPLICATE_BOOK_MESSAGE)

        now = datetime.now(timezone.utc)
        oid = ObjectId()
        document = dict(fields, _id=oid, createdAt=now, updatedAt=now)
        self._documents[oid] = document
        return BookRecord.from_document(document)

    async def find_all(self) -> List[BookRecord]:
        return [BookRecord.from_document(doc) for doc in self._documents.values()]

    async def find_duplicate(
        self, title: str, author: str, exclude_id: Optional[str] = None
    ) -> Optional[BookRecord]:
        exclude = ObjectId(exclude_id) if exclude_id is not None else None
        document = self._conflicting(title, author, exclude)
        return BookRecord.from_document(document) if document else None

    async def find_by_id(self, book_id: str) -> Optional[BookRecord]:
        document = self._documents.get(ObjectId(book_id))
        return BookRecord.from_document(document) if document else None

    async def update_by_id(self, book_id: str, fields: Dict[str, Any]) -> Optional[BookRecord]:
        oid = ObjectId(book_id)
        document = self._documents.get(oid)
        if document is None:
            return None
        if self._conflicting(fields["title"], fields["author"], exclude=oid) is not None:
            raise DuplicateError(DUPLICATE_BOOK_MESSAGE)

        document.update(fields, updatedAt=datetime.now(timezone.utc))
        return BookRecord.from_document(document)

    async def delete_by_id(self, book_id: str) -> bool:
        return self._documents.pop(ObjectId(book_id), None) is not None
