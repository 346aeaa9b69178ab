"""
List Project Users Use Case

Members and open invitations of a project, merged into one paginated list.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.project_access_guard import Caller, ProjectAccessGuard
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.permissions import ProjectPermission

from .dtos import InvitationInfo, ListProjectUsersResponse, ProjectUserEntry, UserInfo
from .pagination import total_pages, validate_page


class ListProjectUsersUseCase:
    """
    Use case for listing a project's users.

    Business Rules:
    - Caller needs project.users.view
    - Only pending, unexpired invitations are listed; expired ones stay
      untouched in the store
    - Entries are ordered newest first
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.guard = ProjectAccessGuard(uow)

    async def execute(
        self, caller: Caller, project_id: UUID, page: int = 1, limit: int = 10
    ) -> Result[ListProjectUsersResponse]:
        page_error = validate_page(page, limit)
        if page_error is not None:
            return Return.err(page_error)

        async with self.uow:
            access_result = await self.guard.require_permission(
                caller, project_id, ProjectPermission.USERS_VIEW
            )
            if access_result.is_err():
                return Return.err(access_result.error)

            project = await self.uow.projects.get_by_id(project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            memberships = await self.uow.memberships.get_by_project_id(project_id)
            invitations = await self.uow.invitations.list_open_by_project(
                project_id, utc_now()
            )

            user_ids = {m.user_id for m in memberships}
            user_ids.update(i.user_id for i in invitations if i.user_id is not None)
            users = {
                user.id: user for user in await self.uow.users.get_by_ids(list(user_ids))
            }

            rows = []
            for membership in memberships:
                user = users.get(membership.user_id)
                rows.append(
                    (
                        membership.created_at,
                        ProjectUserEntry(
                            type="user",
                            id=str(membership.id),
                            user=_user_info(user),
                            user_type=membership.user_type.value,
                            email=user.email if user else "",
                            created_at=membership.created_at.isoformat(),
                            is_primary_client=project.primary_client_id == membership.user_id,
                        ),
                    )
                )

            for invitation in invitations:
                user = users.get(invitation.user_id) if invitation.user_id else None
                rows.append(
                    (
                        invitation.created_at,
                        ProjectUserEntry(
                            type="invitation",
                            id=str(invitation.id),
                            user=_user_info(user),
                            user_type=invitation.user_type.value,
                            email=invitation.email,
                            created_at=invitation.created_at.isoformat(),
                            invitation=InvitationInfo(
                                id=str(invitation.id),
                                status=invitation.status.value,
                                expires_at=invitation.expires_at.isoformat(),
                            ),
                        ),
                    )
                )

            rows.sort(key=lambda row: row[0], reverse=True)
            offset = (page - 1) * limit
            total = len(rows)

            return Return.ok(
                ListProjectUsersResponse(
                    entries=[entry for _, entry in rows[offset : offset + limit]],
                    total=total,
                    page=page,
                    limit=limit,
                    total_pages=total_pages(total, limit),
                )
            )


def _user_info(user):
    if user is None:
        return None
    return UserInfo(id=str(user.id), name=user.name, email=user.email)
