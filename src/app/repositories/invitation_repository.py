from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Invitation, InvitationState


class DuplicateInvitationToken(Exception):
    """Another invitation already holds the token; the transaction was rolled back"""


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        pass

    @abstractmethod
    async def get_open_by_project_and_email(
        self, project_id: UUID, email: str, now: datetime
    ) -> Optional[Invitation]:
        """Get the pending, unexpired invitation for a project and email"""
        pass

    @abstractmethod
    async def list_open_by_project(
        self, project_id: UUID, now: datetime
    ) -> List[Invitation]:
        """Pending, unexpired invitations for a project, newest first"""
        pass

    @abstractmethod
    async def list_open_by_email(
        self, email: str, now: datetime, limit: int, offset: int
    ) -> Tuple[List[Invitation], int]:
        """
        Page of pending, unexpired invitations for an email, plus total count.

        Only invitations whose project still exists are listed or counted.
        """
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """
        Create a new invitation.

        Raises:
            DuplicateInvitationToken: the token is already taken. The unit of
                work has been rolled back, so the caller must start over.
        """
        pass

    @abstractmethod
    async def transition(
        self,
        invitation: Invitation,
        target: InvitationState,
        user_id: Optional[UUID] = None,
    ) -> bool:
        """
        Move a pending invitation to a terminal state.

        Applied as a single conditional write; returns False when the row was
        no longer pending, in which case nothing was changed.
        """
        pass
