"""Book Pydantic schemas."""
from typing import Optional

from pydantic import BaseModel, Field

from library_management.schemas.common import BaseSchema


class BookBase(BaseModel):
    """Base book schema."""

    title: str = Field(..., min_length=1, max_length=300)
    author: str = Field(..., min_length=1, max_length=200)
    isbn: Optional[str] = Field(None, max_length=20)
    publication_year: Optional[int] = None


class BookCreate(BookBase):
    """Schema for creating a book. New books are always available."""

    library_id: int = Field(..., gt=0)


class BookUpdate(BaseModel):
    """Schema for updating a book.

    Availability is not part of the payload: only the loan lifecycle sets it.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=300)
    author: Optional[str] = Field(None, min_length=1, max_length=200)
    isbn: Optional[str] = Field(None, max_length=20)
    publication_year: Optional[int] = None
    library_id: Optional[int] = Field(None, gt=0)


class BookResponse(BookBase, BaseSchema):
    """Schema for book response."""

    id: int
    library_id: int
    is_available: bool
