"""Member Pydantic schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from library_management.schemas.common import BaseSchema


class MemberBase(BaseModel):
    """Base member schema."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=30)


class MemberCreate(MemberBase):
    """Schema for creating a member."""

    library_id: int = Field(..., gt=0)


class MemberUpdate(BaseModel):
    """Schema for updating a member."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=30)
    library_id: Optional[int] = Field(None, gt=0)


class MemberResponse(MemberBase, BaseSchema):
    """Schema for member response."""

    id: int
    library_id: int
    registration_date: datetime
    full_name: str
