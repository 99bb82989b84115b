"""Book API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, status

from library_management.dependencies import get_book_service, get_loan_service
from library_management.models import Book, Loan
from library_management.schemas.book import BookCreate, BookResponse, BookUpdate
from library_management.schemas.loan import LoanResponse
from library_management.services import BookService, LoanService

router = APIRouter(prefix="/books", tags=["Books"])


@router.get("", response_model=list[BookResponse])
async def list_books(
    library_id: Optional[int] = None,
    service: BookService = Depends(get_book_service),
) -> list[Book]:
    """List books, optionally for one library."""
    return await service.list_books(library_id=library_id)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_data: BookCreate,
    service: BookService = Depends(get_book_service),
) -> Book:
    return await service.create_book(book_data)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> Book:
    return await service.get_book(book_id)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: int,
    book_data: BookUpdate,
    service: BookService = Depends(get_book_service),
) -> Book:
    return await service.update_book(book_id, book_data)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> None:
    """Delete a book. Refused while the book is on loan."""
    await service.delete_book(book_id)


@router.get("/{book_id}/loans", response_model=list[LoanResponse])
async def list_book_loans(
    book_id: int,
    service: LoanService = Depends(get_loan_service),
) -> list[Loan]:
    """Loan history of a book."""
    return await service.get_loans_by_book(book_id)
