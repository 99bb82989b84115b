"""Loan model."""
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_management.core.clock import utcnow
from library_management.database import Base

if TYPE_CHECKING:
    from library_management.models.book import Book
    from library_management.models.library import Library
    from library_management.models.member import Member


class Loan(Base):
    """A member borrowing a book; active while ``return_date`` is null."""

    __tablename__ = "loans"
    __table_args__ = (
        # At most one active loan per book, checked by the database at flush time
        Index(
            "ix_loans_one_active_per_book",
            "book_id",
            unique=True,
            postgresql_where=text("return_date IS NULL"),
            sqlite_where=text("return_date IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    member_id: Mapped[int] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Mirrors books.library_id for library-scoped queries
    library_id: Mapped[int] = mapped_column(
        ForeignKey("libraries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    loan_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    return_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="loans")
    member: Mapped["Member"] = relationship("Member", back_populates="loans")
    library: Mapped["Library"] = relationship("Library")

    @property
    def is_active(self) -> bool:
        return self.return_date is None

    @property
    def is_overdue(self) -> bool:
        return self.is_active and self.due_date < utcnow()

    # Display fields; require book, book.library and member to be loaded
    @property
    def library_name(self) -> str:
        return self.book.library.name

    @property
    def book_title(self) -> str:
        return self.book.title

    @property
    def book_isbn(self) -> Optional[str]:
        return self.book.isbn

    @property
    def member_full_name(self) -> str:
        return self.member.full_name

    def __repr__(self) -> str:
        return (
            f"<Loan(id={self.id}, book_id={self.book_id}, "
            f"member_id={self.member_id}, return_date={self.return_date})>"
        )
