"""
Get Project Access Use Case

Reports what the caller may do on a project, for UI gating.
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.project_access_guard import Caller, ProjectAccessGuard
from src.app.services.unit_of_work import UnitOfWork
from src.domain.permissions import (
    PROJECT_PERMISSION_CATEGORIES,
    PROJECT_PERMISSION_DESCRIPTIONS,
    ProjectPermission,
)

from .dtos import PermissionInfo, ProjectAccessResponse, ProjectRef

_CATEGORY_BY_PERMISSION = {
    permission: category
    for category, permissions in PROJECT_PERMISSION_CATEGORIES.items()
    for permission in permissions
}


class GetProjectAccessUseCase:
    """
    Use case for reading the caller's own access to a project.

    Business Rules:
    - Owners, members and invitees get an answer
    - Anyone else sees the project as not found
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.guard = ProjectAccessGuard(uow)

    async def execute(
        self, caller: Caller, project_id: UUID
    ) -> Result[ProjectAccessResponse]:
        async with self.uow:
            access_result = await self.guard.require_permission(
                caller,
                project_id,
                [
                    ProjectPermission.OWNER,
                    ProjectPermission.MEMBER,
                    ProjectPermission.INVITED,
                ],
            )
            if access_result.is_err():
                return Return.err(access_result.error)

            access = access_result.value
            permissions = [
                PermissionInfo(
                    name=permission.value,
                    description=PROJECT_PERMISSION_DESCRIPTIONS[permission],
                    category=_CATEGORY_BY_PERMISSION.get(permission),
                )
                for permission in sorted(access.granted, key=lambda p: p.value)
            ]

            return Return.ok(
                ProjectAccessResponse(
                    project=ProjectRef(id=str(access.project_id), name=access.project_name),
                    role=access.role.value,
                    permission=access.permission.value,
                    permissions=permissions,
                    is_owner=access.is_owner,
                    is_member=access.is_member,
                    is_invited=access.is_invited,
                    via_site_admin=access.via_site_admin,
                    user_type=access.user_type.value if access.user_type else None,
                )
            )
