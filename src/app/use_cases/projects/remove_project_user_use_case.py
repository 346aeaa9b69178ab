"""
Remove Project User Use Case

Handles taking a member off a project.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.email_sender import IEmailSender
from src.app.services.project_access_guard import Caller, ProjectAccessGuard
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.view_invalidator import (
    IViewInvalidator,
    notifications_view,
    project_users_view,
    project_view,
)
from src.domain.permissions import ProjectPermission

from .dtos import RemoveProjectUserResponse
from .messages import removed_from_project_email, removed_from_project_notification

logger = logging.getLogger(__name__)


class RemoveProjectUserUseCase:
    """
    Use case for removing members from a project.

    Business Rules:
    - Caller needs project.users.remove (owner only)
    - The owner cannot be removed; ownership is not a membership
    - The membership row is deleted
    - Removing the primary client clears the designation in the same write
    - The removed user is notified and emailed
    """

    def __init__(
        self, uow: UnitOfWork, email_sender: IEmailSender, views: IViewInvalidator
    ):
        self.uow = uow
        self.guard = ProjectAccessGuard(uow)
        self.email_sender = email_sender
        self.views = views

    async def execute(
        self, caller: Caller, project_id: UUID, user_id: UUID
    ) -> Result[RemoveProjectUserResponse]:
        """
        Execute remove project user use case.

        Args:
            caller: Identity of the person removing the member
            project_id: Project ID
            user_id: User ID of the member to remove

        Returns:
            Result with RemoveProjectUserResponse DTO, or Error
        """
        async with self.uow:
            access_result = await self.guard.require_permission(
                caller, project_id, ProjectPermission.USERS_REMOVE
            )
            if access_result.is_err():
                return Return.err(access_result.error)

            project = await self.uow.projects.get_by_id(project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            if project.owner_user_id == user_id:
                return Return.err(
                    Error("CANNOT_REMOVE_OWNER", "You cannot remove the project owner.")
                )

            membership = await self.uow.memberships.get_by_project_and_user(
                project_id, user_id
            )
            if membership is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "User is not on this project.")
                )

            user_type = membership.user_type.value
            removed_user = await self.uow.users.get_by_id(user_id)

            await self.uow.memberships.delete(membership)

            primary_client_cleared = project.primary_client_id == user_id
            if primary_client_cleared:
                await self.uow.projects.set_primary_client(project, None)

            if removed_user is not None:
                await self.uow.notifications.create(
                    removed_from_project_notification(
                        removed_user.id, caller.display_name, project.name, user_type
                    )
                )

            await self.uow.commit()

            logger.info(
                "User %s removed from project %s by %s",
                user_id,
                project_id,
                caller.user_id,
            )

            if removed_user is not None:
                message = removed_from_project_email(
                    to=removed_user.email,
                    removed_name=removed_user.display_name,
                    remover_name=caller.display_name,
                    project_name=project.name,
                    user_type=user_type,
                )
                await self.email_sender.send(
                    message.to, message.subject, message.html, message.text
                )

            stale = [project_users_view(project_id), notifications_view(user_id)]
            if primary_client_cleared:
                stale.append(project_view(project_id))
            await self.views.invalidate(stale)

            return Return.ok(
                RemoveProjectUserResponse(
                    status="removed", primary_client_cleared=primary_client_cleared
                )
            )
