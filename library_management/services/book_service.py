"""Book service for the catalog."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from library_management.core.exceptions import ConflictError, NotFoundError
from library_management.core.logging import get_logger
from library_management.models import Book, Library
from library_management.repositories import Repository, translate_errors
from library_management.schemas.book import BookCreate, BookUpdate
from library_management.services.loan_query_service import LoanQueryService

logger = get_logger("services.books")

REQUIRED_FIELDS = ("title", "author", "library_id")


class BookService:
    """Service for book operations.

    Availability is never written here; see ``LoanService``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.books = Repository(db, Book)
        self.libraries = Repository(db, Library)
        self.loan_queries = LoanQueryService(db)

    async def create_book(self, data: BookCreate) -> Book:
        """Add a book to a library's catalog."""
        async with translate_errors(self.db):
            if not await self.libraries.exists(data.library_id):
                raise NotFoundError("Library", data.library_id)

            book = Book(
                library_id=data.library_id,
                title=data.title,
                author=data.author,
                isbn=data.isbn,
                publication_year=data.publication_year,
                is_available=True,
            )
            await self.books.add(book)
        logger.info(f"Created book {book.id} in library {book.library_id}")
        return book

    async def get_book(self, book_id: int) -> Book:
        async with translate_errors(self.db):
            book = await self.books.get_by_id(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        return book

    async def list_books(self, library_id: Optional[int] = None) -> list[Book]:
        async with translate_errors(self.db):
            if library_id is None:
                return await self.books.list_all()
            return await self.books.list_filtered(
                Book.library_id == library_id, order_by=(Book.title, Book.id)
            )

    async def update_book(self, book_id: int, data: BookUpdate) -> Book:
        """Update catalog fields of a book.

        A book on an active loan cannot move to another library. A book with
        only returned loans can, and those loans follow it to the new library.
        """
        book = await self.get_book(book_id)
        update_data = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if not (field in REQUIRED_FIELDS and value is None)
        }

        async with translate_errors(self.db):
            new_library_id = update_data.get("library_id")
            moved = new_library_id is not None and new_library_id != book.library_id
            if moved:
                if not await self.libraries.exists(new_library_id):
                    raise NotFoundError("Library", new_library_id)
                if await self.loan_queries.has_active_loan(book.id):
                    raise ConflictError(
                        "Cannot move a book to another library while it is on loan",
                        details={"book_id": book.id},
                    )

                # Loans mirror the book's library
                for loan in await self.loan_queries.get_loans_by_book(book.id):
                    loan.library_id = new_library_id

            for field, value in update_data.items():
                setattr(book, field, value)
            await self.books.update(book)

        if moved:
            logger.info(f"Moved book {book.id} to library {new_library_id}")
        return book

    async def delete_book(self, book_id: int) -> None:
        """Delete a book and its loan history; refused while it is on loan."""
        book = await self.get_book(book_id)
        async with translate_errors(self.db):
            loans = await self.loan_queries.get_loans_by_book(book_id)
            if any(loan.return_date is None for loan in loans):
                raise ConflictError(
                    "Cannot delete the book because it has active loans",
                    details={"book_id": book_id},
                )
            await self.books.delete(book)
        logger.info(f"Deleted book {book_id}")
