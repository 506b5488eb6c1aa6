"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from books_api.config import APIConfig
from books_api.main import create_app
from storage.memory import InMemoryBookStore


@pytest.fixture
def memory_store():
    """Create an empty in-memory store."""
    return InMemoryBookStore()


@pytest.fixture
def settings():
    """Settings that ignore the environment's .env file."""
    return APIConfig(_env_file=None, store_backend="memory")


@pytest.fixture
def client(settings, memory_store):
    """Create a test client running the app lifespan."""
    app = create_app(settings=settings, store=memory_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def dune_payload():
    """Request body for a sample book."""
    return {"title": "Dune", "author": "Herbert", "publishedYear": 1965}


@pytest.fixture
def foundation_payload():
    """Request body for a second sample book."""
    return {"title": "Foundation", "author": "Asimov", "publishedYear": 1951}
