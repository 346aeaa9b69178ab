from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.membership_repository import IMembershipRepository
from src.domain.entities import Membership


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_project_and_user(
        self, project_id: UUID, user_id: UUID
    ) -> Optional[Membership]:
        """Get membership by project and user"""
        stmt = select(Membership).where(
            Membership.project_id == project_id, Membership.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_project_id(self, project_id: UUID) -> List[Membership]:
        """Get all memberships for a project"""
        stmt = (
            select(Membership)
            .where(Membership.project_id == project_id)
            .order_by(Membership.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, membership: Membership) -> Membership:
        """Create a new membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: Membership) -> None:
        """Delete a membership"""
        await self.session.delete(membership)
        await self.session.flush()
