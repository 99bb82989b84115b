"""Loan API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, status

from library_management.dependencies import get_loan_query_service, get_loan_service
from library_management.models import Loan
from library_management.schemas.common import ErrorResponse
from library_management.schemas.loan import LoanCreate, LoanDetailsResponse, LoanUpdate
from library_management.services import LoanQueryService, LoanService

router = APIRouter(
    prefix="/loans",
    tags=["Loans"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[LoanDetailsResponse])
async def list_loans(
    library_id: Optional[int] = None,
    book_id: Optional[int] = None,
    member_id: Optional[int] = None,
    active: Optional[bool] = None,
    queries: LoanQueryService = Depends(get_loan_query_service),
) -> list[Loan]:
    """List loans, active first and most recent due date first."""
    return await queries.list_loans(
        library_id=library_id,
        book_id=book_id,
        member_id=member_id,
        active=active,
    )


@router.post("", response_model=LoanDetailsResponse, status_code=status.HTTP_201_CREATED)
async def create_loan(
    loan_data: LoanCreate,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    """Lend a book. Responds 409 if the book is already on loan."""
    return await service.create_loan(loan_data)


@router.get("/{loan_id}", response_model=LoanDetailsResponse)
async def get_loan(
    loan_id: int,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    return await service.get_loan_with_details(loan_id)


@router.put("/{loan_id}", response_model=LoanDetailsResponse)
async def update_loan(
    loan_id: int,
    loan_data: LoanUpdate,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    """Update a loan; set ``return_date`` to record a return."""
    return await service.update_loan(loan_id, loan_data)


@router.post("/{loan_id}/return", response_model=LoanDetailsResponse)
async def return_loan(
    loan_id: int,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    """Record the return of a loan as of now."""
    return await service.return_loan(loan_id)


@router.delete("/{loan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_loan(
    loan_id: int,
    service: LoanService = Depends(get_loan_service),
) -> None:
    await service.delete_loan(loan_id)
