"""
List Pending Invitations Use Case

The caller's invitation inbox.
"""

from libs.result import Result, Return
from src.app.services.project_access_guard import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now

from .dtos import ListPendingInvitationsResponse, PendingInvitation, ProjectRef, UserInfo
from .pagination import total_pages, validate_page


class ListPendingInvitationsUseCase:
    """
    Use case for listing invitations addressed to the caller's email.

    Business Rules:
    - Only pending, unexpired invitations; newest first
    - Tokens are never included; they travel by email only
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, caller: Caller, page: int = 1, limit: int = 10
    ) -> Result[ListPendingInvitationsResponse]:
        page_error = validate_page(page, limit)
        if page_error is not None:
            return Return.err(page_error)

        async with self.uow:
            invitations, total = await self.uow.invitations.list_open_by_email(
                caller.email, utc_now(), limit, (page - 1) * limit
            )

            projects = {
                project.id: project
                for project in await self.uow.projects.get_by_ids(
                    list({i.project_id for i in invitations})
                )
            }
            inviters = {
                user.id: user
                for user in await self.uow.users.get_by_ids(
                    list({i.invited_by_id for i in invitations})
                )
            }

            items = []
            for invitation in invitations:
                project = projects[invitation.project_id]
                inviter = inviters.get(invitation.invited_by_id)
                items.append(
                    PendingInvitation(
                        id=str(invitation.id),
                        project=ProjectRef(id=str(project.id), name=project.name),
                        invited_by=(
                            UserInfo(id=str(inviter.id), name=inviter.name, email=inviter.email)
                            if inviter
                            else None
                        ),
                        user_type=invitation.user_type.value,
                        expires_at=invitation.expires_at.isoformat(),
                        created_at=invitation.created_at.isoformat(),
                    )
                )

            return Return.ok(
                ListPendingInvitationsResponse(
                    invitations=items,
                    total=total,
                    page=page,
                    limit=limit,
                    total_pages=total_pages(total, limit),
                )
            )
