from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Membership


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def get_by_project_and_user(
        self, project_id: UUID, user_id: UUID
    ) -> Optional[Membership]:
        """Get membership by project and user"""
        pass

    @abstractmethod
    async def get_by_project_id(self, project_id: UUID) -> List[Membership]:
        """Get all memberships for a project, newest first"""
        pass

    @abstractmethod
    async def create(self, membership: Membership) -> Membership:
        """Create a new membership"""
        pass

    @abstractmethod
    async def delete(self, membership: Membership) -> None:
        """Delete a membership"""
        pass
