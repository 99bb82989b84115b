"""Library API routes."""
from fastapi import APIRouter, Depends, status

from library_management.dependencies import get_library_service, get_loan_query_service
from library_management.models import Library
from library_management.schemas.library import LibraryCreate, LibraryResponse, LibraryUpdate
from library_management.schemas.loan import LibraryLoansResponse
from library_management.services import LibraryService, LoanQueryService

router = APIRouter(prefix="/libraries", tags=["Libraries"])


@router.get("", response_model=list[LibraryResponse])
async def list_libraries(
    service: LibraryService = Depends(get_library_service),
) -> list[Library]:
    """List all libraries."""
    return await service.list_libraries()


@router.post("", response_model=LibraryResponse, status_code=status.HTTP_201_CREATED)
async def create_library(
    library_data: LibraryCreate,
    service: LibraryService = Depends(get_library_service),
) -> Library:
    """Create a new library."""
    return await service.create_library(library_data)


@router.get("/{library_id}", response_model=LibraryResponse)
async def get_library(
    library_id: int,
    service: LibraryService = Depends(get_library_service),
) -> Library:
    return await service.get_library(library_id)


@router.put("/{library_id}", response_model=LibraryResponse)
async def update_library(
    library_id: int,
    library_data: LibraryUpdate,
    service: LibraryService = Depends(get_library_service),
) -> Library:
    return await service.update_library(library_id, library_data)


@router.delete("/{library_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_library(
    library_id: int,
    service: LibraryService = Depends(get_library_service),
) -> None:
    """Delete a library with its books, members and loans."""
    await service.delete_library(library_id)


@router.get("/{library_id}/loans", response_model=LibraryLoansResponse)
async def list_library_loans(
    library_id: int,
    queries: LoanQueryService = Depends(get_loan_query_service),
) -> dict:
    """Loans of one library in display order, with the library's name."""
    library_name = await queries.get_library_name(library_id)
    loans = await queries.list_by_library(library_id)
    return {
        "library_id": library_id,
        "library_name": library_name,
        "loans": loans,
    }
