"""
Project Role Resolver

Derives a user's role on a project from persisted facts.
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.permissions import ProjectRole


class ProjectRoleResolver:
    """
    Resolve OWNER / MEMBER / INVITED / NONE for (user, project).

    Precedence, first match wins:
    1. Project does not exist -> NONE
    2. project.owner_user_id == user -> OWNER
    3. Membership row exists -> MEMBER
    4. Pending, unexpired invitation for the user's email -> INVITED
    5. NONE

    Every call reads the store again. Roles change between requests (an
    invitation accepted elsewhere, a member removed) and a stale answer here
    grants access that no longer exists.

    Must be called inside an open unit of work.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def resolve(self, user_id: UUID, project_id: UUID) -> ProjectRole:
        project = await self.uow.projects.get_by_id(project_id)
        if project is None:
            return ProjectRole.NONE

        if project.owner_user_id == user_id:
            return ProjectRole.OWNER

        membership = await self.uow.memberships.get_by_project_and_user(
            project_id, user_id
        )
        if membership is not None:
            return ProjectRole.MEMBER

        user = await self.uow.users.get_by_id(user_id)
        if user is not None and user.email:
            invitation = await self.uow.invitations.get_open_by_project_and_email(
                project_id, user.email, utc_now()
            )
            if invitation is not None:
                return ProjectRole.INVITED

        return ProjectRole.NONE
