"""Book model."""
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_management.database import Base

if TYPE_CHECKING:
    from library_management.models.library import Library
    from library_management.models.loan import Loan


class Book(Base):
    """Book model.

    ``is_available`` is owned by the loan lifecycle: it is written only by
    ``LoanService`` in the same transaction as the loan row it reflects.
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    library_id: Mapped[int] = mapped_column(
        ForeignKey("libraries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    author: Mapped[str] = mapped_column(String(200), nullable=False)
    isbn: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    publication_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    library: Mapped["Library"] = relationship("Library", back_populates="books")
    loans: Mapped[list["Loan"]] = relationship(
        "Loan", back_populates="book", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title={self.title}, is_available={self.is_available})>"
