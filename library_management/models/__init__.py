"""SQLAlchemy models."""
from library_management.models.book import Book
from library_management.models.library import Library
from library_management.models.loan import Loan
from library_management.models.member import Member

__all__ = [
    "Library",
    "Book",
    "Member",
    "Loan",
]
