"""
MongoDB record store for async operations.
Handles connection, indexing, and CRUD operations for book data.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from books_api.errors import DUPLICATE_BOOK_MESSAGE, DuplicateError, StoreError
from books_api.models import BookRecord
from storage.base import BookStore

logger = structlog.get_logger(__name__)

TITLE_AUTHOR_INDEX = "title_author_unique"


class MongoBookStore(BookStore):
    """
    Async MongoDB store for book records.
    Handles connection, indexing, and CRUD operations.
    """

    def __init__(
        self,
        connection_url: str,
        database_name: str,
        collection_name: str,
        timeout_ms: int = 5000,
    ):
        """
        Initialize MongoDB store.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            collection_name: Name of the collection
            timeout_ms: Server selection timeout in milliseconds
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.collection_name = collection_name
        self.timeout_ms = timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(
                self.connection_url, serverSelectionTimeoutMS=self.timeout_ms, tz_aware=True
            )
            self.database = self.client[self.database_name]
            self.collection = self.database[self.collection_name]

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        collection=self.collection_name)

            await self._create_indexes()

        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            if self.client:
                self.client.close()
                self.client = None
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        """
        Create the unique compound index on (title, author).

        The index makes the store reject concurrent duplicates that slip
        past the application-level lookup.
        """
        try:
            await self.collection.create_index(
                [("title", ASCENDING), ("author", ASCENDING)],
                unique=True,
                name=TITLE_AUTHOR_INDEX,
            )
            logger.info("Successfully created MongoDB indexes")

        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.database.command("ping")
            books_count = await self.collection.count_documents({})
            return {
                "status": "healthy",
                "books_collection": "accessible",
                "books_count": books_count,
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }

    async def insert_book(self, fields: Dict[str, Any]) -> BookRecord:
        """
        Insert a single book into the database.

        Args:
            fields: title, author and publishedYear

        Returns:
            The stored BookRecord
        """
        now = datetime.now(timezone.utc)
        document = dict(fields, createdAt=now, updatedAt=now)
        try:
            result = await self.collection.insert_one(document)
            document["_id"] = result.inserted_id
            logger.debug("Successfully inserted book", book_id=str(result.inserted_id))
            return BookRecord.from_document(document)

        except DuplicateKeyError:
            logger.warning("Book already exists", title=fields.get("title"), author=fields.get("author"))
            raise DuplicateError(DUPLICATE_BOOK_MESSAGE)

        except PyMongoError as e:
            logger.error("Failed to insert book", title=fields.get("title"), error=str(e))
            raise StoreError(str(e)) from e

    async def find_all(self) -> List[BookRecord]:
        """Retrieve every book in the collection."""
        try:
            books = []
            async for document in self.collection.find({}):
                books.append(BookRecord.from_document(document))

            logger.debug("Retrieved books", count=len(books))
            return books

        except PyMongoError as e:
            logger.error("Failed to retrieve books", error=str(e))
            raise StoreError(str(e)) from e

    async def find_duplicate(
        self, title: str, author: str, exclude_id: Optional[str] = None
    ) -> Optional[BookRecord]:
        """
        Look up a book holding the same title and author.

        Args:
            title: Book title
            author: Book author
            exclude_id: Identifier of a book to ignore, used when updating

        Returns:
            BookRecord or None if no other book matches
        """
        query: Dict[str, Any] = {"title": title, "author": author}
        if exclude_id is not None:
            query["_id"] = {"$ne": ObjectId(exclude_id)}
        try:
            document = await self.collection.find_one(query)
            return BookRecord.from_document(document) if document else None

        except PyMongoError as e:
            logger.error("Failed to look up duplicate", title=title, author=author, error=str(e))
            raise StoreError(str(e)) from e

    async def find_by_id(self, book_id: str) -> Optional[BookRecord]:
        """
        Get a book by MongoDB _id.

        Args:
            book_id: MongoDB _id of the book

        Returns:
            BookRecord or None if not found
        """
        try:
            document = await self.collection.find_one({"_id": ObjectId(book_id)})
            return BookRecord.from_document(document) if document else None

        except PyMongoError as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            raise StoreError(str(e)) from e

    async def update_by_id(self, book_id: str, fields: Dict[str, Any]) -> Optional[BookRecord]:
        """
        Replace a book's fields by MongoDB _id.

        Args:
            book_id: MongoDB _id of the book to update
            fields: title, author and publishedYear

        Returns:
            The updated BookRecord, or None if not found
        """
        update_data = dict(fields, updatedAt=datetime.now(timezone.utc))
        try:
            document = await self.collection.find_one_and_update(
                {"_id": ObjectId(book_id)},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER,
            )
            if document is None:
                logger.warning("Book not found for update", book_id=book_id)
                return None

            logger.debug("Successfully updated book by ID", book_id=book_id)
            return BookRecord.from_document(document)

        except DuplicateKeyError:
            logger.warning("Update conflicts with existing book", book_id=book_id)
            raise DuplicateError(DUPLICATE_BOOK_MESSAGE)

        except PyMongoError as e:
            logger.error("Failed to update book by ID", book_id=book_id, error=str(e))
            raise StoreError(str(e)) from e

    async def delete_by_id(self, book_id: str) -> bool:
        """
        Delete a book by MongoDB _id.

        Args:
            book_id: MongoDB _id of the book to delete

        Returns:
            bool: True if deleted, False if not found
        """
        try:
            result = await self.collection.delete_one({"_id": ObjectId(book_id)})

            if result.deleted_count > 0:
                logger.debug("Successfully deleted book", book_id=book_id)
                return True

            logger.warning("Book not found for deletion", book_id=book_id)
            return False

        except PyMongoError as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise StoreError(str(e)) from e
