"""
Project Access Guard

Authorizes a caller against a project using the permission tables.
"""

from typing import FrozenSet, Iterable, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from libs.result import Error, Result, Return
from src.app.services.project_role_resolver import ProjectRoleResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ProjectUserType
from src.domain.permissions import (
    EXISTENCE_MASKING_PERMISSIONS,
    ROLE_BASE_PERMISSION,
    ProjectPermission,
    ProjectRole,
    SitePermission,
    permissions_for,
    site_permissions_for,
)

PROJECT_NOT_FOUND = Error("PROJECT_NOT_FOUND", "Project not found")
INSUFFICIENT_PERMISSION = Error(
    "INSUFFICIENT_PERMISSION",
    "You don't have permission to perform this action on this project",
)


class Caller(BaseModel):
    """Identity of the current caller as supplied by the session"""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str
    name: Optional[str] = None
    roles: Tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.name or self.email


class ProjectAccess(BaseModel):
    """Outcome of a successful permission check; never persisted"""

    model_config = ConfigDict(frozen=True)

    project_id: UUID
    project_name: str
    project_owner_id: UUID
    role: ProjectRole
    permission: ProjectPermission
    granted: FrozenSet[ProjectPermission]
    is_owner: bool
    is_member: bool
    is_invited: bool
    via_site_admin: bool = False
    user_type: Optional[ProjectUserType] = None


class ProjectAccessGuard:
    """
    Grants or refuses a project operation.

    Rules:
    - Unknown project -> PROJECT_NOT_FOUND
    - Site-wide project:all capability -> OWNER-equivalent access for this call
      only; no membership is created and ownership is untouched
    - Otherwise the caller's derived role must grant at least one of the
      requested permissions
    - Refusals of project:owner / project:member hide the project
      (PROJECT_NOT_FOUND); every other refusal is INSUFFICIENT_PERMISSION

    Must be called inside an open unit of work.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.resolver = ProjectRoleResolver(uow)

    async def require_permission(
        self,
        caller: Caller,
        project_id: UUID,
        required: Union[ProjectPermission, Iterable[ProjectPermission]],
    ) -> Result[ProjectAccess]:
        if isinstance(required, ProjectPermission):
            required = (required,)
        required = tuple(required)

        project = await self.uow.projects.get_by_id(project_id)
        if project is None:
            return Return.err(PROJECT_NOT_FOUND)

        if SitePermission.PROJECT_ALL in site_permissions_for(caller.roles):
            return Return.ok(
                ProjectAccess(
                    project_id=project.id,
                    project_name=project.name,
                    project_owner_id=project.owner_user_id,
                    role=ProjectRole.OWNER,
                    permission=ProjectPermission.OWNER,
                    granted=permissions_for(ProjectRole.OWNER),
                    is_owner=False,
                    is_member=True,
                    is_invited=False,
                    via_site_admin=True,
                )
            )

        role = await self.resolver.resolve(caller.user_id, project_id)
        granted = permissions_for(role)

        if not any(permission in granted for permission in required):
            if EXISTENCE_MASKING_PERMISSIONS.intersection(required):
                return Return.err(PROJECT_NOT_FOUND)
            return Return.err(INSUFFICIENT_PERMISSION)

        user_type = None
        if role == ProjectRole.MEMBER:
            membership = await self.uow.memberships.get_by_project_and_user(
                project_id, caller.user_id
            )
            if membership is not None:
                user_type = membership.user_type

        return Return.ok(
            ProjectAccess(
                project_id=project.id,
                project_name=project.name,
                project_owner_id=project.owner_user_id,
                role=role,
                permission=ROLE_BASE_PERMISSION[role],
                granted=granted,
                is_owner=role == ProjectRole.OWNER,
                is_member=role in (ProjectRole.OWNER, ProjectRole.MEMBER),
                is_invited=role == ProjectRole.INVITED,
                user_type=user_type,
            )
        )
