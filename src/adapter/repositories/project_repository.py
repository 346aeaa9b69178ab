from typing import List, Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.project_repository import IProjectRepository
from src.domain.entities import Project


class ProjectRepository(IProjectRepository):
    """Project repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """Get project by ID"""
        stmt = select(Project).where(Project.id == project_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, project_ids: List[UUID]) -> List[Project]:
        """Get projects by ID"""
        if not project_ids:
            return []
        stmt = select(Project).where(Project.id.in_(project_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_primary_client(
        self, project: Project, user_id: Optional[UUID]
    ) -> Project:
        """Update the primary client column"""
        project.primary_client_id = user_id
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def claim_primary_client(self, project: Project, user_id: UUID) -> bool:
        """Set the primary client only while the project has none"""
        stmt = (
            update(Project)
            .where(Project.id == project.id, Project.primary_client_id.is_(None))
            .values(primary_client_id=user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False

        await self.session.refresh(project)
        return True
