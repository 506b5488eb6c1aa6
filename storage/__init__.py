"""
Record store backends for book data.
"""

from storage.base import BookStore
from storage.memory import InMemoryBookStore
from storage.mongo import MongoBookStore


def create_store(settings) -> BookStore:
    """
    Build the store selected by the ``store_backend`` setting.

    Args:
        settings: APIConfig instance

    Returns:
        An unconnected BookStore
    """
    if settings.store_backend == "memory":
        return InMemoryBookStore()
    return MongoBookStore(
        connection_url=settings.mongodb_url,
        database_name=settings.mongodb_database,
        collection_name=settings.mongodb_collection,
        timeout_ms=settings.mongodb_timeout_ms,
    )


__all__ = ["BookStore", "InMemoryBookStore", "MongoBookStore", "create_store"]
