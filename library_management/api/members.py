"""Member API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, status

from library_management.dependencies import get_loan_service, get_member_service
from library_management.models import Loan, Member
from library_management.schemas.loan import LoanResponse
from library_management.schemas.member import MemberCreate, MemberResponse, MemberUpdate
from library_management.services import LoanService, MemberService

router = APIRouter(prefix="/members", tags=["Members"])


@router.get("", response_model=list[MemberResponse])
async def list_members(
    library_id: Optional[int] = None,
    service: MemberService = Depends(get_member_service),
) -> list[Member]:
    return await service.list_members(library_id=library_id)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    member_data: MemberCreate,
    service: MemberService = Depends(get_member_service),
) -> Member:
    return await service.create_member(member_data)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: int,
    service: MemberService = Depends(get_member_service),
) -> Member:
    return await service.get_member(member_id)


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: int,
    member_data: MemberUpdate,
    service: MemberService = Depends(get_member_service),
) -> Member:
    return await service.update_member(member_id, member_data)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: int,
    service: MemberService = Depends(get_member_service),
) -> None:
    """Delete a member. Refused while they hold an active loan."""
    await service.delete_member(member_id)


@router.get("/{member_id}/loans", response_model=list[LoanResponse])
async def list_member_loans(
    member_id: int,
    service: LoanService = Depends(get_loan_service),
) -> list[Loan]:
    return await service.get_loans_by_member(member_id)
