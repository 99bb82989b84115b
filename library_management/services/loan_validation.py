"""Validation of loan requests.

There is one routine per request type. Each performs the structural checks
and the existence checks against the database, so web and API callers share
a single code path. Books are read with a row lock because the caller goes on
to check and change their availability in the same transaction.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from library_management.config import settings
from library_management.core.clock import to_naive_utc
from library_management.core.exceptions import NotFoundError, ValidationError
from library_management.models import Book, Library, Loan, Member
from library_management.repositories import Repository
from library_management.schemas.loan import LoanCreate, LoanUpdate


@dataclass
class ValidatedLoanRequest:
    """Entities and normalized values a loan request resolved to."""

    library: Library
    book: Book
    member: Member
    due_date: datetime
    return_date: Optional[datetime] = None
    # Book the loan pointed at before an update; same object as ``book``
    # when the update keeps the book
    previous_book: Optional[Book] = None


class LoanRequestValidator:
    """Validate loan create and update requests."""

    def __init__(self, db: AsyncSession):
        self.libraries = Repository(db, Library)
        self.books = Repository(db, Book)
        self.members = Repository(db, Member)

    async def validate_create(self, data: LoanCreate, now: datetime) -> ValidatedLoanRequest:
        """Validate a create request issued at ``now``."""
        due_date = to_naive_utc(data.due_date)
        if due_date is None:
            due_date = now + timedelta(days=settings.default_loan_days)
        if due_date <= now:
            raise ValidationError("Due date must be in the future.", field="due_date")

        book = await self._lock_book(data.book_id)
        library = await self._require(self.libraries, "Library", data.library_id)
        member = await self._require(self.members, "Member", data.member_id)

        if book.library_id != library.id:
            raise ValidationError(
                "The selected book does not belong to the selected library.",
                field="library_id",
            )

        return ValidatedLoanRequest(
            library=library,
            book=book,
            member=member,
            due_date=due_date,
        )

    async def validate_update(
        self,
        loan: Loan,
        data: LoanUpdate,
        now: datetime,
    ) -> ValidatedLoanRequest:
        """Validate an update of ``loan``; omitted fields keep stored values."""
        changes = data.model_dump(exclude_unset=True)

        if changes.get("id") is not None and changes["id"] != loan.id:
            raise ValidationError("Loan id does not match the request path.", field="id")

        book_id = changes.get("book_id") or loan.book_id
        member_id = changes.get("member_id") or loan.member_id

        # Lock in id order so concurrent moves between two books cannot deadlock
        locked: dict[int, Book] = {}
        for locked_id in sorted({loan.book_id, book_id}):
            book = await self.books.get_for_update(locked_id)
            if book is not None:
                locked[locked_id] = book
        book = locked.get(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)

        member = await self._require(self.members, "Member", member_id)

        library_id = changes.get("library_id") or book.library_id
        library = await self._require(self.libraries, "Library", library_id)
        if library.id != book.library_id:
            raise ValidationError(
                "The selected book does not belong to the selected library.",
                field="library_id",
            )

        due_date = to_naive_utc(changes.get("due_date")) or loan.due_date
        if due_date < loan.loan_date:
            raise ValidationError(
                "Due date cannot be earlier than the loan date.", field="due_date"
            )

        return_date = loan.return_date
        if "return_date" in changes:
            return_date = to_naive_utc(changes["return_date"])
            if return_date is not None:
                # Lower bound is exact, upper bound is by calendar day
                if return_date < loan.loan_date:
                    raise ValidationError(
                        "Return date cannot be earlier than the loan date.",
                        field="return_date",
                    )
                if return_date.date() > now.date():
                    raise ValidationError(
                        "Return date cannot be in the future.", field="return_date"
                    )

        return ValidatedLoanRequest(
            library=library,
            book=book,
            member=member,
            due_date=due_date,
            return_date=return_date,
            previous_book=locked.get(loan.book_id),
        )

    async def _lock_book(self, book_id: int) -> Book:
        book = await self.books.get_for_update(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        return book

    @staticmethod
    async def _require(repository: Repository, resource: str, entity_id: int):
        entity = await repository.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(resource, entity_id)
        return entity
