"""Loan lifecycle: creating, updating, returning and deleting loans.

``LoanService`` is the only writer of ``Book.is_available``. Every operation
reads the current persisted state, locks the affected book rows and writes the
loan together with the availability flag in the caller's transaction, so a
book is unavailable exactly while an active loan references it.
"""
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from library_management.core.clock import utcnow
from library_management.core.exceptions import ConflictError, NotFoundError
from library_management.core.logging import get_logger
from library_management.models import Book, Loan
from library_management.repositories import Repository, translate_errors
from library_management.schemas.loan import LoanCreate, LoanUpdate
from library_management.services.loan_query_service import LoanQueryService
from library_management.services.loan_validation import LoanRequestValidator

logger = get_logger("services.loans")

BOOK_ON_LOAN = "Book is already on loan"


class LoanService:
    """Service for loan operations."""

    def __init__(self, db: AsyncSession, clock: Callable = utcnow):
        self.db = db
        self.clock = clock
        self.loans = Repository(db, Loan)
        self.books = Repository(db, Book)
        self.validator = LoanRequestValidator(db)
        self.queries = LoanQueryService(db)

    async def create_loan(self, data: LoanCreate) -> Loan:
        """Lend a book to a member and mark the book unavailable."""
        now = self.clock()
        async with translate_errors(self.db, BOOK_ON_LOAN):
            request = await self.validator.validate_create(data, now)
            book = request.book

            if await self.queries.has_active_loan(book.id):
                logger.warning(f"Rejected loan of book {book.id}: already on loan")
                raise ConflictError(BOOK_ON_LOAN, details={"book_id": book.id})

            loan = Loan(
                book_id=book.id,
                member_id=request.member.id,
                library_id=book.library_id,
                loan_date=now,
                due_date=request.due_date,
                return_date=None,
            )
            self.db.add(loan)
            book.is_available = False
            await self.db.flush()

        logger.info(
            f"Created loan {loan.id}: book {book.id} -> member {loan.member_id}, "
            f"due {loan.due_date:%Y-%m-%d}"
        )
        return await self.queries.get_loan_with_details(loan.id)

    async def update_loan(self, loan_id: int, data: LoanUpdate) -> Loan:
        """Update a loan and keep the availability of the books involved in step.

        Setting ``return_date`` releases the book. Clearing it re-activates the
        loan, which is rejected if the book has been lent again meanwhile.
        Moving an active loan to another book releases the old book and
        requires the new one to be free.
        """
        now = self.clock()
        async with translate_errors(self.db, BOOK_ON_LOAN):
            loan = await self.loans.get_by_id(loan_id)
            if loan is None:
                raise NotFoundError("Loan", loan_id)

            request = await self.validator.validate_update(loan, data, now)
            book = request.book
            previous_book = request.previous_book

            was_active = loan.return_date is None
            will_be_active = request.return_date is None
            moved = book.id != loan.book_id

            if will_be_active and (moved or not was_active):
                if await self.queries.has_active_loan(book.id, exclude_loan_id=loan.id):
                    logger.warning(
                        f"Rejected update of loan {loan.id}: book {book.id} is on another loan"
                    )
                    raise ConflictError(BOOK_ON_LOAN, details={"book_id": book.id})

            loan.book_id = book.id
            loan.member_id = request.member.id
            loan.library_id = book.library_id
            loan.due_date = request.due_date
            loan.return_date = request.return_date

            if was_active and previous_book is not None and (moved or not will_be_active):
                previous_book.is_available = True
            if will_be_active:
                book.is_available = False

            await self.db.flush()

        if was_active and not will_be_active:
            logger.info(f"Loan {loan.id} returned; book {book.id} available again")
        elif not was_active and will_be_active:
            logger.info(f"Loan {loan.id} re-activated; book {book.id} unavailable")
        else:
            logger.info(f"Updated loan {loan.id}")
        return await self.queries.get_loan_with_details(loan.id)

    async def return_loan(self, loan_id: int) -> Loan:
        """Record the return of a loan as of now."""
        async with translate_errors(self.db):
            loan = await self.queries.get_loan(loan_id)
        if loan.return_date is not None:
            raise ConflictError("Loan has already been returned", details={"loan_id": loan_id})
        return await self.update_loan(loan_id, LoanUpdate(return_date=self.clock()))

    async def delete_loan(self, loan_id: int) -> None:
        """Delete a loan. Deleting an active loan releases its book."""
        async with translate_errors(self.db):
            loan = await self.loans.get_by_id(loan_id)
            if loan is None:
                raise NotFoundError("Loan", loan_id)

            released: Optional[Book] = None
            if loan.return_date is None:
                released = await self.books.get_for_update(loan.book_id)
                if released is not None:
                    released.is_available = True

            await self.loans.delete(loan)

        if released is not None:
            logger.info(f"Deleted active loan {loan_id}; book {released.id} available again")
        else:
            logger.info(f"Deleted loan {loan_id}")

    async def get_loan(self, loan_id: int) -> Loan:
        return await self.queries.get_loan(loan_id)

    async def get_loan_with_details(self, loan_id: int) -> Loan:
        return await self.queries.get_loan_with_details(loan_id)

    async def get_loans_by_book(self, book_id: int) -> list[Loan]:
        return await self.queries.get_loans_by_book(book_id)

    async def get_loans_by_member(self, member_id: int) -> list[Loan]:
        return await self.queries.get_loans_by_member(member_id)
