"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class BookInput(BaseModel):
    """
    Request body for creating or replacing a book.

    Fields are optional at the schema level so that missing values are
    reported together, by name, instead of as a schema error.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    published_year: Optional[StrictInt] = Field(None, alias="publishedYear", description="Year of publication")

    def missing_fields(self) -> List[str]:
        """Return the wire names of required fields that are absent or blank."""
        missing = []
        if not self.title or not self.title.strip():
            missing.append("title")
        if not self.author or not self.author.strip():
            missing.append("author")
        if self.published_year is None:
            missing.append("publishedYear")
        return missing

    def to_document(self) -> Dict[str, Any]:
        """Fields as stored in the collection."""
        return {
            "title": self.title,
            "author": self.author,
            "publishedYear": self.published_year,
        }


class BookRecord(BaseModel):
    """A stored book."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    published_year: int = Field(..., alias="publishedYear", description="Year of publication")
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt", description="Last update timestamp")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "BookRecord":
        """Build a record from a raw store document."""
        document = dict(document)
        document["_id"] = str(document["_id"])
        return cls.model_validate(document)

    def to_response(self) -> Dict[str, Any]:
        """JSON-ready dict using the wire field names."""
        return self.model_dump(by_alias=True, mode="json")


class BookListResponse(BaseModel):
    """Response model for the book listing."""
    count: int = Field(..., description="Number of books")
    books: List[BookRecord] = Field(..., description="List of books")


class BookFoundResponse(BaseModel):
    """Response model for a single book lookup."""
    message: str = Field(..., description="Status message")
    book: BookRecord = Field(..., description="The matching book")


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str = Field(..., description="Status message")


class ErrorResponse(BaseModel):
    """Error response model."""
    message: str = Field(..., description="Error message")
    error: Optional[str] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
