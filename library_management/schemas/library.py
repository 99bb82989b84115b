"""Library Pydantic schemas."""
from typing import Optional

from pydantic import BaseModel, Field

from library_management.schemas.common import BaseSchema


class LibraryBase(BaseModel):
    """Base library schema."""

    name: str = Field(..., min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=500)


class LibraryCreate(LibraryBase):
    """Schema for creating a library."""

    pass


class LibraryUpdate(BaseModel):
    """Schema for updating a library."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=500)


class LibraryResponse(LibraryBase, BaseSchema):
    """Schema for library response."""

    id: int
