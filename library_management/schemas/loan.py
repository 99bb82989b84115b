"""Loan Pydantic schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from library_management.schemas.common import BaseSchema


class LoanCreate(BaseModel):
    """Schema for creating a loan.

    ``due_date`` defaults to the configured loan period when omitted.
    """

    library_id: int = Field(..., gt=0)
    book_id: int = Field(..., gt=0)
    member_id: int = Field(..., gt=0)
    due_date: Optional[datetime] = None


class LoanUpdate(BaseModel):
    """Schema for updating a loan.

    Omitted fields keep their stored value. An explicit ``"return_date": null``
    clears the return and re-activates the loan.
    """

    id: Optional[int] = Field(None, gt=0)
    library_id: Optional[int] = Field(None, gt=0)
    book_id: Optional[int] = Field(None, gt=0)
    member_id: Optional[int] = Field(None, gt=0)
    due_date: Optional[datetime] = None
    return_date: Optional[datetime] = None


class LoanResponse(BaseSchema):
    """Schema for loan response."""

    id: int
    book_id: int
    member_id: int
    library_id: int
    loan_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    is_active: bool
    is_overdue: bool


class LoanDetailsResponse(LoanResponse):
    """Loan joined with its book, member and library for display."""

    library_name: str
    book_title: str
    book_isbn: Optional[str] = None
    member_full_name: str


class LibraryLoansResponse(BaseModel):
    """Loans of one library; ``library_name`` is set even with no loans."""

    library_id: int
    library_name: str
    loans: list[LoanDetailsResponse]
