"""Business logic services."""
from library_management.services.book_service import BookService
from library_management.services.library_service import LibraryService
from library_management.services.loan_query_service import LoanQueryService
from library_management.services.loan_service import LoanService
from library_management.services.loan_validation import LoanRequestValidator
from library_management.services.member_service import MemberService

__all__ = [
    "LibraryService",
    "BookService",
    "MemberService",
    "LoanService",
    "LoanQueryService",
    "LoanRequestValidator",
]
