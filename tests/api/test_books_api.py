"""
Tests for the book endpoints of the FastAPI application.
"""

import pytest
from unittest.mock import AsyncMock

from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ConnectionFailure

from books_api.config import APIConfig
from books_api.errors import StoreError
from books_api.main import create_app
from storage.memory import InMemoryBookStore


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database_status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data


def test_create_book(client, dune_payload):
    """Test creating a book returns the stored record."""
    response = client.post("/books", json=dune_payload)
    assert response.status_code == 201
    data = response.json()
    assert ObjectId.is_valid(data["_id"])
    assert data["title"] == "Dune"
    assert data["author"] == "Herbert"
    assert data["publishedYear"] == 1965
    assert data["createdAt"] is not None


def test_create_book_missing_fields(client, memory_store):
    """Test that missing fields are named in a 400 response."""
    response = client.post("/books", json={"title": "Dune"})
    assert response.status_code == 400
    message = response.json()["message"]
    assert "author" in message
    assert "publishedYear" in message
    assert "title" not in message.split(":", 1)[1]
    assert len(memory_store) == 0


def test_create_book_empty_title(client, dune_payload):
    """Test that an empty title counts as missing."""
    dune_payload["title"] = ""
    response = client.post("/books", json=dune_payload)
    assert response.status_code == 400
    assert "title" in response.json()["message"]


def test_create_book_wrong_type(client, dune_payload):
    """Test that a body with a non-numeric year is rejected with 400."""
    dune_payload["publishedYear"] = "nineteen sixty-five"
    response = client.post("/books", json=dune_payload)
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Invalid request body"
    assert "publishedYear" in data["error"]


def test_create_duplicate_book(client, dune_payload):
    """Test that the same title and author is rejected regardless of year."""
    assert client.post("/books", json=dune_payload).status_code == 201

    dune_payload["publishedYear"] = 1984
    response = client.post("/books", json=dune_payload)
    assert response.status_code == 400
    assert "already exists" in response.json()["message"]


def test_list_books_empty(client):
    """Test that listing an empty catalogue answers 404."""
    response = client.get("/books")
    assert response.status_code == 404
    assert response.json()["message"] == "No books found"


def test_list_books_empty_allowed(memory_store):
    """Test that the empty-catalogue 404 can be switched off."""
    settings = APIConfig(_env_file=None, store_backend="memory", empty_collection_not_found=False)
    with TestClient(create_app(settings=settings, store=memory_store)) as client:
        response = client.get("/books")
    assert response.status_code == 200
    assert response.json() == {"count": 0, "books": []}


def test_list_books(client, dune_payload, foundation_payload):
    """Test listing returns every book with a count."""
    client.post("/books", json=dune_payload)
    client.post("/books", json=foundation_payload)

    response = client.get("/books")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert {book["title"] for book in data["books"]} == {"Dune", "Foundation"}


def test_get_book(client, dune_payload):
    """Test get book by ID endpoint."""
    book_id = client.post("/books", json=dune_payload).json()["_id"]

    response = client.get(f"/books/{book_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Book found"
    assert data["book"]["_id"] == book_id
    assert data["book"]["title"] == "Dune"


def test_get_book_malformed_id(client):
    """Test that a malformed identifier is a 400."""
    response = client.get("/books/not-an-object-id")
    assert response.status_code == 400
    assert "not-an-object-id" in response.json()["message"]


def test_book_not_found(client):
    """Test book not found scenario."""
    response = client.get(f"/books/{ObjectId()}")
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found"}


def test_update_book(client, dune_payload):
    """Test that an update replaces the fields and keeps the identifier."""
    created = client.post("/books", json=dune_payload).json()

    response = client.put(
        f"/books/{created['_id']}",
        json={"title": "Dune Messiah", "author": "Frank Herbert", "publishedYear": 1969},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["_id"] == created["_id"]
    assert data["title"] == "Dune Messiah"
    assert data["author"] == "Frank Herbert"
    assert data["publishedYear"] == 1969


def test_update_book_keeps_own_pair(client, dune_payload):
    """Test updating only the year of a book succeeds."""
    book_id = client.post("/books", json=dune_payload).json()["_id"]

    dune_payload["publishedYear"] = 1966
    response = client.put(f"/books/{book_id}", json=dune_payload)
    assert response.status_code == 200
    assert response.json()["publishedYear"] == 1966


def test_update_book_conflict(client, dune_payload, foundation_payload):
    """Test updating onto another book's title and author is rejected."""
    client.post("/books", json=dune_payload)
    book_id = client.post("/books", json=foundation_payload).json()["_id"]

    response = client.put(f"/books/{book_id}", json=dune_payload)
    assert response.status_code == 400

    unchanged = client.get(f"/books/{book_id}").json()["book"]
    assert unchanged["title"] == "Foundation"


def test_update_book_missing_fields(client, dune_payload):
    """Test that updates require all three fields."""
    book_id = client.post("/books", json=dune_payload).json()["_id"]

    response = client.put(f"/books/{book_id}", json={"title": "Dune"})
    assert response.status_code == 400


def test_update_book_not_found(client, dune_payload):
    """Test updating an unknown book is a 404."""
    response = client.put(f"/books/{ObjectId()}", json=dune_payload)
    assert response.status_code == 404


def test_delete_book(client, dune_payload):
    """Test deleting a book confirms without echoing it."""
    book_id = client.post("/books", json=dune_payload).json()["_id"]

    response = client.delete(f"/books/{book_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Book deleted successfully"}
    assert client.get(f"/books/{book_id}").status_code == 404


def test_delete_book_not_found(client):
    """Test deleting an unknown book is a 404."""
    response = client.delete(f"/books/{ObjectId()}")
    assert response.status_code == 404


def test_store_failure_is_500(settings):
    """Test that store failures surface their message with a 500."""
    store = AsyncMock(spec=InMemoryBookStore)
    store.find_all.side_effect = StoreError("connection reset")

    with TestClient(create_app(settings=settings, store=store)) as client:
        response = client.get("/books")
    assert response.status_code == 500
    assert response.json() == {"message": "connection reset"}


def test_cors_preflight(client):
    """Test the configured origin is allowed."""
    response = client.options(
        "/books",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_book_lifecycle(client, dune_payload):
    """Create, read, reject duplicate, delete, then miss."""
    created = client.post("/books", json=dune_payload)
    assert created.status_code == 201
    book_id = created.json()["_id"]

    found = client.get(f"/books/{book_id}")
    assert found.status_code == 200
    assert found.json()["book"]["title"] == "Dune"

    assert client.post("/books", json=dune_payload).status_code == 400
    assert client.delete(f"/books/{book_id}").status_code == 200
    assert client.get(f"/books/{book_id}").status_code == 404


def test_create_book_boolean_year(client, dune_payload, memory_store):
    """Test that a boolean publishedYear is not read as a number."""
    dune_payload["publishedYear"] = True
    response = client.post("/books", json=dune_payload)
    assert response.status_code == 400
    assert "publishedYear" in response.json()["error"]
    assert len(memory_store) == 0


def test_delete_book_malformed_id(client):
    """Test deleting with a malformed identifier is a 400."""
    response = client.delete("/books/xyz")
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid book id: xyz"}


def test_startup_fails_without_store(settings):
    """Test the app refuses to start when the store cannot connect."""
    store = AsyncMock(spec=InMemoryBookStore)
    store.connect.side_effect = ConnectionFailure("down")

    with pytest.raises(ConnectionFailure):
        with TestClient(create_app(settings=settings, store=store)):
            pass

    store.find_all.assert_not_called()
