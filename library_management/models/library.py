"""Library model."""
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_management.database import Base

if TYPE_CHECKING:
    from library_management.models.book import Book
    from library_management.models.member import Member


class Library(Base):
    """A branch that owns books and members."""

    __tablename__ = "libraries"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Relationships
    books: Mapped[list["Book"]] = relationship(
        "Book", back_populates="library", cascade="all, delete-orphan"
    )
    members: Mapped[list["Member"]] = relationship(
        "Member", back_populates="library", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Library(id={self.id}, name={self.name})>"
