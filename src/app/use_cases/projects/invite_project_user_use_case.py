"""
Invite Project User Use Case

Handles inviting a person, by email, to join a project with a membership type.
"""

import logging
import secrets
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, TypeAdapter, ValidationError

from libs.result import Error, Result, Return
from src.app.repositories.invitation_repository import DuplicateInvitationToken
from src.app.services.email_sender import IEmailSender
from src.app.services.project_access_guard import Caller, ProjectAccessGuard
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.view_invalidator import (
    IViewInvalidator,
    invitations_inbox_view,
    notifications_view,
    project_users_view,
    project_view,
)
from src.domain.base import utc_now
from src.domain.entities import (
    INVITATION_TTL,
    Accepted,
    Invitation,
    Membership,
    ProjectUserType,
)
from src.domain.permissions import ProjectPermission

from .dtos import InviteProjectUserResponse
from .messages import (
    added_as_primary_client_notification,
    invitation_email,
    invitation_notification,
)

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)

TOKEN_GENERATION_FAILED = Error(
    "TOKEN_GENERATION_FAILED", "Could not generate invitation token"
)


class InviteProjectUserUseCase:
    """
    Use case for inviting users to a project.

    Business Rules:
    - Caller needs project.users.invite
    - user_type must be Client, Contractor, Employee or Legal
    - Cannot invite someone who is already on the project (member or owner)
    - At most one open (pending, unexpired) invitation per project and email
    - Primary-client shortcut: when the project has no primary client, the
      type is Client and an account already exists for the email, the user is
      added and designated immediately and the invitation row is written
      already accepted, for the audit trail. The designation is a conditional
      write, so of two concurrent Client invites only one takes the shortcut
    - Otherwise a pending invitation with a 256-bit token, valid 7 days
    - A token taken by another invitation at insert time restarts the whole
      operation with a fresh token, up to TOKEN_ATTEMPTS times
    - Invitation email goes out after commit; existing accounts also get an
      in-app notification
    """

    TOKEN_ATTEMPTS = 3

    def __init__(
        self,
        uow: UnitOfWork,
        email_sender: IEmailSender,
        views: IViewInvalidator,
        base_url: str,
    ):
        self.uow = uow
        self.guard = ProjectAccessGuard(uow)
        self.email_sender = email_sender
        self.views = views
        self.base_url = base_url.rstrip("/")

    async def execute(
        self, caller: Caller, project_id: UUID, email: str, user_type: str
    ) -> Result[InviteProjectUserResponse]:
        """
        Execute invite project user use case.

        Args:
            caller: Identity of the person sending the invite
            project_id: Target project ID
            email: Email address to invite, stored exactly as given
            user_type: Membership type to grant on acceptance

        Returns:
            Result with InviteProjectUserResponse DTO, or Error
        """
        try:
            project_user_type = ProjectUserType(user_type)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_USER_TYPE",
                    "Invalid user type. Must be one of: Client, Contractor, Employee, Legal",
                )
            )

        try:
            _email_adapter.validate_python(email)
        except ValidationError:
            return Return.err(Error("INVALID_EMAIL", "Invalid email address"))

        for _ in range(self.TOKEN_ATTEMPTS):
            try:
                return await self._invite(caller, project_id, email, project_user_type)
            except DuplicateInvitationToken:
                logger.warning(
                    "Invitation token collided on insert for project %s, retrying",
                    project_id,
                )
        return Return.err(TOKEN_GENERATION_FAILED)

    async def _invite(
        self,
        caller: Caller,
        project_id: UUID,
        email: str,
        project_user_type: ProjectUserType,
    ) -> Result[InviteProjectUserResponse]:
        async with self.uow:
            access_result = await self.guard.require_permission(
                caller, project_id, ProjectPermission.USERS_INVITE
            )
            if access_result.is_err():
                return Return.err(access_result.error)

            project = await self.uow.projects.get_by_id(project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            existing_user = await self.uow.users.get_by_email(email)
            if existing_user is not None:
                if existing_user.id == project.owner_user_id:
                    return Return.err(
                        Error("ALREADY_MEMBER", "This user is already on the project.")
                    )
                existing_membership = await self.uow.memberships.get_by_project_and_user(
                    project_id, existing_user.id
                )
                if existing_membership is not None:
                    return Return.err(
                        Error("ALREADY_MEMBER", "This user is already on the project.")
                    )

            now = utc_now()
            open_invitation = await self.uow.invitations.get_open_by_project_and_email(
                project_id, email, now
            )
            if open_invitation is not None:
                return Return.err(
                    Error(
                        "INVITE_ALREADY_EXISTS",
                        "An invitation has already been sent to this email.",
                    )
                )

            token = await self._generate_token()
            if token is None:
                return Return.err(TOKEN_GENERATION_FAILED)

            invitation = Invitation(
                project_id=project_id,
                email=email,
                user_id=existing_user.id if existing_user else None,
                user_type=project_user_type,
                token=token,
                invited_by_id=caller.user_id,
                expires_at=now + INVITATION_TTL,
            )

            claimed_primary_client = (
                project.primary_client_id is None
                and project_user_type == ProjectUserType.client
                and existing_user is not None
                and await self.uow.projects.claim_primary_client(
                    project, existing_user.id
                )
            )

            if claimed_primary_client:
                await self.uow.memberships.create(
                    Membership(
                        project_id=project_id,
                        user_id=existing_user.id,
                        user_type=ProjectUserType.client,
                    )
                )

                invitation.move_to(Accepted(accepted_at=now))
                await self.uow.invitations.create(invitation)

                await self.uow.notifications.create(
                    added_as_primary_client_notification(
                        existing_user.id,
                        caller.display_name,
                        project_id,
                        project.name,
                    )
                )

                await self.uow.commit()

                logger.info(
                    "Added user %s to project %s as primary client (invitation %s)",
                    existing_user.id,
                    project_id,
                    invitation.id,
                )

                await self.views.invalidate(
                    [
                        project_users_view(project_id),
                        project_view(project_id),
                        notifications_view(existing_user.id),
                    ]
                )

                return Return.ok(
                    InviteProjectUserResponse(
                        invite_id=str(invitation.id),
                        status=invitation.status.value,
                        email=email,
                        user_type=project_user_type.value,
                        expires_at=invitation.expires_at.isoformat(),
                        added_directly=True,
                        message=f"{existing_user.display_name} has been added as the primary client.",
                    )
                )

            await self.uow.invitations.create(invitation)

            if existing_user is not None:
                await self.uow.notifications.create(
                    invitation_notification(
                        existing_user.id,
                        caller.display_name,
                        project.name,
                        project_user_type.value,
                    )
                )

            await self.uow.commit()

            logger.info(
                "Created invitation %s for project %s", invitation.id, project_id
            )

            # Side effects only after the write is committed
            message = invitation_email(
                to=email,
                inviter_name=caller.display_name,
                project_name=project.name,
                user_type=project_user_type.value,
                invitation_url=f"{self.base_url}/invitations/accept?token={token}",
            )
            await self.email_sender.send(
                message.to, message.subject, message.html, message.text
            )

            stale = [project_users_view(project_id), invitations_inbox_view(email)]
            if existing_user is not None:
                stale.append(notifications_view(existing_user.id))
            await self.views.invalidate(stale)

            return Return.ok(
                InviteProjectUserResponse(
                    invite_id=str(invitation.id),
                    status=invitation.status.value,
                    email=email,
                    user_type=project_user_type.value,
                    expires_at=invitation.expires_at.isoformat(),
                    added_directly=False,
                    message=f"An invitation has been sent to {email}",
                )
            )

    async def _generate_token(self) -> Optional[str]:
        # A repeat is astronomically unlikely; treat it as transient and retry
        for _ in range(self.TOKEN_ATTEMPTS):
            token = secrets.token_urlsafe(32)
            if await self.uow.invitations.get_by_token(token) is None:
                return token
        return None
