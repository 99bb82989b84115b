"""Library service for managing library branches."""
from sqlalchemy.ext.asyncio import AsyncSession

from library_management.core.exceptions import NotFoundError
from library_management.core.logging import get_logger
from library_management.models import Library
from library_management.repositories import Repository, translate_errors
from library_management.schemas.library import LibraryCreate, LibraryUpdate

logger = get_logger("services.libraries")


class LibraryService:
    """Service for library operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.libraries = Repository(db, Library)

    async def create_library(self, data: LibraryCreate) -> Library:
        """Create a new library."""
        library = Library(name=data.name, address=data.address)
        async with translate_errors(self.db):
            await self.libraries.add(library)
        logger.info(f"Created library {library.id} ({library.name})")
        return library

    async def get_library(self, library_id: int) -> Library:
        async with translate_errors(self.db):
            library = await self.libraries.get_by_id(library_id)
        if library is None:
            raise NotFoundError("Library", library_id)
        return library

    async def list_libraries(self) -> list[Library]:
        async with translate_errors(self.db):
            return await self.libraries.list_all()

    async def update_library(self, library_id: int, data: LibraryUpdate) -> Library:
        """Update a library."""
        library = await self.get_library(library_id)
        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if field == "name" and value is None:
                continue
            setattr(library, field, value)

        async with translate_errors(self.db):
            await self.libraries.update(library)
        return library

    async def delete_library(self, library_id: int) -> None:
        """Delete a library together with its books, members and their loans."""
        library = await self.get_library(library_id)
        async with translate_errors(self.db):
            await self.libraries.delete(library)
        logger.info(f"Deleted library {library_id} and everything it owned")
