from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_repository import (
    DuplicateInvitationToken,
    IInvitationRepository,
)
from src.domain.entities import (
    Invitation,
    InvitationState,
    InvitationStatus,
    Project,
)
from src.domain.entities.invitation import ensure_transition


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = select(Invitation).where(Invitation.id == invitation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        stmt = select(Invitation).where(Invitation.token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_open_by_project_and_email(
        self, project_id: UUID, email: str, now: datetime
    ) -> Optional[Invitation]:
        """Get open invitation by project and email"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.project_id == project_id,
                Invitation.email == email,
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at > now,
            )
            .order_by(Invitation.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_open_by_project(
        self, project_id: UUID, now: datetime
    ) -> List[Invitation]:
        """Get open invitations for a project"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.project_id == project_id,
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at > now,
            )
            .order_by(Invitation.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_open_by_email(
        self, email: str, now: datetime, limit: int, offset: int
    ) -> Tuple[List[Invitation], int]:
        """Get a page of open invitations for an email"""
        conditions = (
            Invitation.email == email,
            Invitation.status == InvitationStatus.pending,
            Invitation.expires_at > now,
        )

        count_stmt = (
            select(func.count())
            .select_from(Invitation)
            .join(Project, Project.id == Invitation.project_id)
            .where(*conditions)
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Invitation)
            .join(Project, Project.id == Invitation.project_id)
            .where(*conditions)
            .order_by(Invitation.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        self.session.add(invitation)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            if await self.get_by_token(invitation.token) is not None:
                raise DuplicateInvitationToken()
            raise
        await self.session.refresh(invitation)
        return invitation

    async def transition(
        self,
        invitation: Invitation,
        target: InvitationState,
        user_id: Optional[UUID] = None,
    ) -> bool:
        """Conditionally move a pending invitation to a terminal state"""
        ensure_transition(invitation.state, target)

        values = {"status": target.status, "accepted_at": target.accepted_at}
        if user_id is not None:
            values["user_id"] = user_id

        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation.id,
                Invitation.status == InvitationStatus.pending,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False

        await self.session.refresh(invitation)
        return True
