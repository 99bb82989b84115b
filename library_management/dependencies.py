"""FastAPI dependencies that bind services to the request's session."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from library_management.database import get_db
from library_management.services import (
    BookService,
    LibraryService,
    LoanQueryService,
    LoanService,
    MemberService,
)


def get_library_service(db: AsyncSession = Depends(get_db)) -> LibraryService:
    return LibraryService(db)


def get_book_service(db: AsyncSession = Depends(get_db)) -> BookService:
    return BookService(db)


def get_member_service(db: AsyncSession = Depends(get_db)) -> MemberService:
    return MemberService(db)


def get_loan_service(db: AsyncSession = Depends(get_db)) -> LoanService:
    return LoanService(db)


def get_loan_query_service(db: AsyncSession = Depends(get_db)) -> LoanQueryService:
    return LoanQueryService(db)
