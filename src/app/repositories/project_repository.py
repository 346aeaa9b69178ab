from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Project


class IProjectRepository(ABC):
    """Project repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """Get project by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, project_ids: List[UUID]) -> List[Project]:
        """Get every project whose ID is listed; unknown IDs are skipped"""
        pass

    @abstractmethod
    async def set_primary_client(
        self, project: Project, user_id: Optional[UUID]
    ) -> Project:
        """Replace (or clear) the project's primary client"""
        pass

    @abstractmethod
    async def claim_primary_client(self, project: Project, user_id: UUID) -> bool:
        """
        Designate a primary client on a project that has none.

        Applied as a single conditional write; returns False when another
        primary client was set first, in which case nothing was changed.
        """
        pass
