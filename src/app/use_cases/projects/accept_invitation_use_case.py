"""
Accept Invitation Use Case

Handles turning a pending invitation into a project membership.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.email_sender import IEmailSender
from src.app.services.project_access_guard import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.view_invalidator import (
    IViewInvalidator,
    invitations_inbox_view,
    notifications_view,
    project_users_view,
    project_view,
)
from src.domain.base import utc_now
from src.domain.entities import Accepted, Membership, Pending

from .dtos import AcceptInvitationResponse, ProjectRef
from .messages import invitation_accepted_email, invitation_accepted_notification

logger = logging.getLogger(__name__)

ALREADY_RESOLVED = Error(
    "INVITATION_ALREADY_RESOLVED",
    "This invitation has already been used or cancelled.",
)


class AcceptInvitationUseCase:
    """
    Use case for accepting project invitations.

    Business Rules:
    - Token must exist, be pending and not expired (expires_at <= now is expired)
    - A non-empty invitation email must equal the caller's email exactly
    - Already on the project: no new membership and no type change, the
      invitation is still marked accepted and the call succeeds
    - Otherwise a membership with the invited type is created
    - The pending -> accepted write is conditional, so of two concurrent
      accepts on one token only one commits
    - The project owner is notified ("joined" or "already a member")
    """

    def __init__(
        self,
        uow: UnitOfWork,
        email_sender: IEmailSender,
        views: IViewInvalidator,
        base_url: str,
    ):
        self.uow = uow
        self.email_sender = email_sender
        self.views = views
        self.base_url = base_url.rstrip("/")

    async def execute(self, caller: Caller, token: str) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            caller: Identity of the accepting user
            token: Invitation token from the email link

        Returns:
            Result with AcceptInvitationResponse DTO, or Error
        """
        if not token or not token.strip():
            return Return.err(Error("TOKEN_REQUIRED", "Invitation token is required"))

        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)
            if invitation is None:
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found or invalid.")
                )

            if not isinstance(invitation.state, Pending):
                return Return.err(ALREADY_RESOLVED)

            now = utc_now()
            if invitation.is_expired(now):
                return Return.err(
                    Error("INVITATION_EXPIRED", "This invitation has expired.")
                )

            if invitation.email and invitation.email != caller.email:
                return Return.err(
                    Error(
                        "EMAIL_MISMATCH",
                        "This invitation was sent to a different email address.",
                    )
                )

            project = await self.uow.projects.get_by_id(invitation.project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            existing_membership = await self.uow.memberships.get_by_project_and_user(
                project.id, caller.user_id
            )
            # The owner never gets a membership row
            already_member = (
                existing_membership is not None
                or project.owner_user_id == caller.user_id
            )

            transitioned = await self.uow.invitations.transition(
                invitation, Accepted(accepted_at=now), user_id=caller.user_id
            )
            if not transitioned:
                await self.uow.rollback()
                return Return.err(ALREADY_RESOLVED)

            if not already_member:
                await self.uow.memberships.create(
                    Membership(
                        project_id=project.id,
                        user_id=caller.user_id,
                        user_type=invitation.user_type,
                    )
                )

            user_type = invitation.user_type.value
            owner = await self.uow.users.get_by_id(project.owner_user_id)
            if owner is not None:
                await self.uow.notifications.create(
                    invitation_accepted_notification(
                        owner.id,
                        caller.display_name,
                        project.id,
                        project.name,
                        user_type,
                        already_member,
                    )
                )

            await self.uow.commit()

            logger.info(
                "Invitation %s accepted by user %s (already_member=%s)",
                invitation.id,
                caller.user_id,
                already_member,
            )

            if owner is not None:
                message = invitation_accepted_email(
                    to=owner.email,
                    owner_name=owner.display_name,
                    accepted_name=caller.display_name,
                    project_name=project.name,
                    user_type=user_type,
                    project_users_url=f"{self.base_url}/projects/{project.id}/users",
                    already_member=already_member,
                )
                await self.email_sender.send(
                    message.to, message.subject, message.html, message.text
                )

            stale = [
                project_view(project.id),
                project_users_view(project.id),
                invitations_inbox_view(caller.email),
            ]
            if owner is not None:
                stale.append(notifications_view(owner.id))
            await self.views.invalidate(stale)

            if already_member:
                message_text = "You are already on this project."
            else:
                message_text = f"You have been added to {project.name}"

            return Return.ok(
                AcceptInvitationResponse(
                    status="accepted",
                    already_member=already_member,
                    project=ProjectRef(id=str(project.id), name=project.name),
                    message=message_text,
                )
            )
