"""
Book endpoints.

Routes only translate between HTTP and BookService; errors raised by the
service are rendered by the application's exception handlers.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from books_api.models import (
    BookFoundResponse, BookInput, BookListResponse, BookRecord,
    ErrorResponse, MessageResponse
)
from books_api.service import BookService

router = APIRouter(prefix="/books", tags=["Books"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_book_service(request: Request) -> BookService:
    """Return the service bound to the running application."""
    return request.app.state.book_service


@router.post(
    "",
    response_model=BookRecord,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_book(book: BookInput, service: BookService = Depends(get_book_service)):
    """
    Add a book to the catalogue.

    - **title**, **author**, **publishedYear** are all required
    - a book with the same title and author must not exist
    """
    created = await service.create_book(book)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=created.to_response())


@router.get("", response_model=BookListResponse, responses=ERROR_RESPONSES)
async def list_books(service: BookService = Depends(get_book_service)):
    """List all books with their count."""
    books = await service.list_books()
    return JSONResponse(content={
        "count": len(books),
        "books": [book.to_response() for book in books],
    })


@router.get("/{book_id}", response_model=BookFoundResponse, responses=ERROR_RESPONSES)
async def get_book(book_id: str, service: BookService = Depends(get_book_service)):
    """
    Get a single book by ID.

    - **book_id**: MongoDB ObjectId of the book
    """
    book = await service.get_book(book_id)
    return JSONResponse(content={"message": "Book found", "book": book.to_response()})


@router.put("/{book_id}", response_model=BookRecord, responses=ERROR_RESPONSES)
async def update_book(
    book_id: str,
    book: BookInput,
    service: BookService = Depends(get_book_service)
):
    """Replace the title, author and publishedYear of a book."""
    updated = await service.update_book(book_id, book)
    return JSONResponse(content=updated.to_response())


@router.delete("/{book_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_book(book_id: str, service: BookService = Depends(get_book_service)):
    """Remove a book from the catalogue."""
    await service.delete_book(book_id)
    return JSONResponse(content={"message": "Book deleted successfully"})
