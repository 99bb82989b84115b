"""Member service."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from library_management.core.exceptions import ConflictError, NotFoundError
from library_management.core.logging import get_logger
from library_management.models import Library, Member
from library_management.repositories import Repository, translate_errors
from library_management.schemas.member import MemberCreate, MemberUpdate
from library_management.services.loan_query_service import LoanQueryService

logger = get_logger("services.members")

REQUIRED_FIELDS = ("first_name", "last_name", "library_id")


class MemberService:
    """Service for member operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.members = Repository(db, Member)
        self.libraries = Repository(db, Library)
        self.loan_queries = LoanQueryService(db)

    async def create_member(self, data: MemberCreate) -> Member:
        """Register a member with a library."""
        async with translate_errors(self.db):
            if not await self.libraries.exists(data.library_id):
                raise NotFoundError("Library", data.library_id)

            member = Member(
                library_id=data.library_id,
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                phone_number=data.phone_number,
            )
            await self.members.add(member)
        logger.info(f"Registered member {member.id} with library {member.library_id}")
        return member

    async def get_member(self, member_id: int) -> Member:
        async with translate_errors(self.db):
            member = await self.members.get_by_id(member_id)
        if member is None:
            raise NotFoundError("Member", member_id)
        return member

    async def list_members(self, library_id: Optional[int] = None) -> list[Member]:
        async with translate_errors(self.db):
            if library_id is None:
                return await self.members.list_all()
            return await self.members.list_filtered(
                Member.library_id == library_id,
                order_by=(Member.last_name, Member.first_name, Member.id),
            )

    async def update_member(self, member_id: int, data: MemberUpdate) -> Member:
        member = await self.get_member(member_id)
        update_data = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if not (field in REQUIRED_FIELDS and value is None)
        }

        async with translate_errors(self.db):
            new_library_id = update_data.get("library_id")
            if new_library_id is not None and not await self.libraries.exists(new_library_id):
                raise NotFoundError("Library", new_library_id)

            for field, value in update_data.items():
                setattr(member, field, value)
            await self.members.update(member)
        return member

    async def delete_member(self, member_id: int) -> None:
        """Delete a member and their loan history; refused while they hold a loan."""
        member = await self.get_member(member_id)
        async with translate_errors(self.db):
            loans = await self.loan_queries.get_loans_by_member(member_id)
            if any(loan.return_date is None for loan in loans):
                raise ConflictError(
                    "Cannot delete the member because they have active loans",
                    details={"member_id": member_id},
                )
            await self.members.delete(member)
        logger.info(f"Deleted member {member_id}")
