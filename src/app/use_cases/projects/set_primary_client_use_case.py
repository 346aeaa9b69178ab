"""
Set Primary Client Use Case

Handles designating (or clearing) a project's primary client.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.project_access_guard import Caller, ProjectAccessGuard
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.view_invalidator import (
    IViewInvalidator,
    project_users_view,
    project_view,
)
from src.domain.entities import ProjectUserType
from src.domain.permissions import ProjectPermission

from .dtos import SetPrimaryClientResponse

logger = logging.getLogger(__name__)


class SetPrimaryClientUseCase:
    """
    Use case for changing a project's primary client.

    Business Rules:
    - Caller needs project.details.update
    - Clearing (user_id None) is always allowed
    - The new primary client must be a Client-type member of the project
    - Setting replaces any previous primary client in one write
    """

    def __init__(self, uow: UnitOfWork, views: IViewInvalidator):
        self.uow = uow
        self.guard = ProjectAccessGuard(uow)
        self.views = views

    async def execute(
        self, caller: Caller, project_id: UUID, user_id: Optional[UUID]
    ) -> Result[SetPrimaryClientResponse]:
        async with self.uow:
            access_result = await self.guard.require_permission(
                caller, project_id, ProjectPermission.DETAILS_UPDATE
            )
            if access_result.is_err():
                return Return.err(access_result.error)

            project = await self.uow.projects.get_by_id(project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            if user_id is None:
                await self.uow.projects.set_primary_client(project, None)
                await self.uow.commit()

                logger.info("Primary client cleared on project %s", project_id)
                await self.views.invalidate(
                    [project_users_view(project_id), project_view(project_id)]
                )

                return Return.ok(
                    SetPrimaryClientResponse(
                        project_id=str(project_id),
                        primary_client_id=None,
                        message="The primary client has been removed from this project.",
                    )
                )

            membership = await self.uow.memberships.get_by_project_and_user(
                project_id, user_id
            )
            if membership is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "User not found on this project.")
                )

            if membership.user_type != ProjectUserType.client:
                return Return.err(
                    Error("NOT_A_CLIENT", "Only clients can be set as the primary client.")
                )

            user = await self.uow.users.get_by_id(user_id)

            await self.uow.projects.set_primary_client(project, user_id)
            await self.uow.commit()

            logger.info("Primary client of project %s set to %s", project_id, user_id)
            await self.views.invalidate(
                [project_users_view(project_id), project_view(project_id)]
            )

            display_name = user.display_name if user is not None else "The user"
            return Return.ok(
                SetPrimaryClientResponse(
                    project_id=str(project_id),
                    primary_client_id=str(user_id),
                    message=f"{display_name} has been set as the primary client.",
                )
            )
