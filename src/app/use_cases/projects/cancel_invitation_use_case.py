"""
Cancel Invitation Use Case

Handles withdrawing a pending invitation.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.project_access_guard import Caller, ProjectAccessGuard
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.view_invalidator import (
    IViewInvalidator,
    invitations_inbox_view,
    project_users_view,
)
from src.domain.entities import Cancelled, Pending
from src.domain.permissions import ProjectPermission

from .dtos import CancelInvitationResponse

logger = logging.getLogger(__name__)

ALREADY_RESOLVED = Error(
    "INVITATION_ALREADY_RESOLVED",
    "This invitation has already been accepted or cancelled.",
)


class CancelInvitationUseCase:
    """
    Use case for cancelling pending invitations.

    Business Rules:
    - Only the project owner may cancel (site admins act as owner)
    - Only pending invitations can be cancelled; accepted and cancelled are final
    - Expired but pending invitations may still be cancelled
    - The invitee is not notified
    """

    def __init__(self, uow: UnitOfWork, views: IViewInvalidator):
        self.uow = uow
        self.guard = ProjectAccessGuard(uow)
        self.views = views

    async def execute(
        self, caller: Caller, invitation_id: UUID
    ) -> Result[CancelInvitationResponse]:
        """
        Execute cancel invitation use case.

        Args:
            caller: Identity of the person cancelling
            invitation_id: ID of the invitation to cancel

        Returns:
            Result with CancelInvitationResponse DTO, or Error
        """
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found."))

            access_result = await self.guard.require_permission(
                caller, invitation.project_id, ProjectPermission.OWNER
            )
            if access_result.is_err():
                return Return.err(access_result.error)

            if not isinstance(invitation.state, Pending):
                return Return.err(ALREADY_RESOLVED)

            if not await self.uow.invitations.transition(invitation, Cancelled()):
                await self.uow.rollback()
                return Return.err(ALREADY_RESOLVED)

            await self.uow.commit()

            logger.info(
                "Invitation %s cancelled by user %s", invitation.id, caller.user_id
            )

            await self.views.invalidate(
                [
                    project_users_view(invitation.project_id),
                    invitations_inbox_view(invitation.email),
                ]
            )

            return Return.ok(CancelInvitationResponse(status="cancelled"))
