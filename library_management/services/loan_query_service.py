"""Loan listings joined with book, member and library data."""
from typing import Optional

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from library_management.core.exceptions import NotFoundError
from library_management.models import Book, Library, Loan, Member
from library_management.repositories import Repository

# Everything the detail views read from related rows
DETAIL_OPTIONS = (
    selectinload(Loan.book).selectinload(Book.library),
    selectinload(Loan.member),
)


def apply_listing_order(query: Select) -> Select:
    """Order loans for display.

    Active loans first, then due date descending, member surname and first
    name ascending, return date ascending with nulls last, and id as the
    final tie-break. ``query`` must already join ``Member``.
    """
    return query.order_by(
        case((Loan.return_date.is_(None), 0), else_=1),
        Loan.due_date.desc(),
        Member.last_name.asc(),
        Member.first_name.asc(),
        Loan.return_date.asc().nulls_last(),
        Loan.id.asc(),
    )


class LoanQueryService:
    """Read-only loan queries. Every call issues a fresh query."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.loans = Repository(db, Loan)

    async def list_loans(
        self,
        library_id: Optional[int] = None,
        book_id: Optional[int] = None,
        member_id: Optional[int] = None,
        active: Optional[bool] = None,
    ) -> list[Loan]:
        """List loans with details, optionally filtered, in display order."""
        query = (
            select(Loan)
            .join(Loan.book)
            .join(Loan.member)
            .options(*DETAIL_OPTIONS)
            .execution_options(populate_existing=True)
        )

        if library_id is not None:
            query = query.where(Book.library_id == library_id)
        if book_id is not None:
            query = query.where(Loan.book_id == book_id)
        if member_id is not None:
            query = query.where(Loan.member_id == member_id)
        if active is True:
            query = query.where(Loan.return_date.is_(None))
        elif active is False:
            query = query.where(Loan.return_date.is_not(None))

        result = await self.db.execute(apply_listing_order(query))
        return list(result.scalars().all())

    async def list_all_with_details(self) -> list[Loan]:
        return await self.list_loans()

    async def list_by_library(self, library_id: int) -> list[Loan]:
        return await self.list_loans(library_id=library_id)

    async def get_library_name(self, library_id: int) -> str:
        """Name of a library, independent of whether it has loans."""
        result = await self.db.execute(
            select(Library.name).where(Library.id == library_id)
        )
        name = result.scalar_one_or_none()
        if name is None:
            raise NotFoundError("Library", library_id)
        return name

    async def get_loan(self, loan_id: int) -> Loan:
        loan = await self.loans.get_by_id(loan_id)
        if loan is None:
            raise NotFoundError("Loan", loan_id)
        return loan

    async def get_loan_with_details(self, loan_id: int) -> Loan:
        loan = await self.loans.get_by_id(loan_id, *DETAIL_OPTIONS)
        if loan is None:
            raise NotFoundError("Loan", loan_id)
        return loan

    async def get_loans_by_book(self, book_id: int) -> list[Loan]:
        return await self.loans.list_filtered(Loan.book_id == book_id)

    async def get_loans_by_member(self, member_id: int) -> list[Loan]:
        return await self.loans.list_filtered(Loan.member_id == member_id)

    async def has_active_loan(
        self,
        book_id: int,
        exclude_loan_id: Optional[int] = None,
    ) -> bool:
        """Whether a persisted active loan references ``book_id``."""
        query = select(Loan.id).where(
            Loan.book_id == book_id,
            Loan.return_date.is_(None),
        )
        if exclude_loan_id is not None:
            query = query.where(Loan.id != exclude_loan_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None
