"""
Project and site permission tables

Pure data. The access guard is the only consumer; adding a permission means
adding an entry here and nowhere else.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable


class ProjectRole(str, Enum):
    """A user's derived relationship to one project"""

    OWNER = "OWNER"
    MEMBER = "MEMBER"
    INVITED = "INVITED"
    NONE = "NONE"


class ProjectPermission(str, Enum):
    """Project-scoped capabilities"""

    # Base role markers
    OWNER = "project:owner"
    MEMBER = "project:member"
    INVITED = "project:invited"
    NONE = "project:none"

    # Details
    DETAILS_VIEW = "project.details.view"
    DETAILS_UPDATE = "project.details.update"

    # Users
    USERS_VIEW = "project.users.view"
    USERS_INVITE = "project.users.invite"
    USERS_REMOVE = "project.users.remove"
    USERS_CANCEL_INVITATION = "project.users.cancelInvitation"

    # Project
    PROJECT_DELETE = "project.project.delete"


PROJECT_PERMISSION_DESCRIPTIONS: Dict[ProjectPermission, str] = {
    ProjectPermission.OWNER: "Project owner - has all permissions on this project",
    ProjectPermission.MEMBER: "Project member - can view and participate in the project",
    ProjectPermission.INVITED: "Invited user - has a pending invitation to join the project",
    ProjectPermission.NONE: "No access to this project",
    ProjectPermission.DETAILS_VIEW: "User can view project details",
    ProjectPermission.DETAILS_UPDATE: "User can update project details",
    ProjectPermission.USERS_VIEW: "User can see other users",
    ProjectPermission.USERS_INVITE: "User can invite other users",
    ProjectPermission.USERS_REMOVE: "User can remove other users",
    ProjectPermission.USERS_CANCEL_INVITATION: "User can cancel pending invitations",
    ProjectPermission.PROJECT_DELETE: "User can delete the project",
}

PROJECT_PERMISSION_CATEGORIES: Dict[str, tuple] = {
    "Users": (
        ProjectPermission.USERS_VIEW,
        ProjectPermission.USERS_INVITE,
        ProjectPermission.USERS_REMOVE,
        ProjectPermission.USERS_CANCEL_INVITATION,
    ),
    "Details": (
        ProjectPermission.DETAILS_VIEW,
        ProjectPermission.DETAILS_UPDATE,
    ),
    "Project": (ProjectPermission.PROJECT_DELETE,),
}

PROJECT_ROLE_PERMISSIONS: Dict[ProjectRole, FrozenSet[ProjectPermission]] = {
    ProjectRole.OWNER: frozenset(
        {
            ProjectPermission.OWNER,
            ProjectPermission.MEMBER,
            ProjectPermission.DETAILS_VIEW,
            ProjectPermission.DETAILS_UPDATE,
            ProjectPermission.PROJECT_DELETE,
            ProjectPermission.USERS_VIEW,
            ProjectPermission.USERS_INVITE,
            ProjectPermission.USERS_REMOVE,
            ProjectPermission.USERS_CANCEL_INVITATION,
        }
    ),
    ProjectRole.MEMBER: frozenset(
        {
            ProjectPermission.MEMBER,
            ProjectPermission.DETAILS_VIEW,
            ProjectPermission.USERS_VIEW,
        }
    ),
    ProjectRole.INVITED: frozenset(
        {
            ProjectPermission.INVITED,
            ProjectPermission.DETAILS_VIEW,
        }
    ),
    ProjectRole.NONE: frozenset({ProjectPermission.NONE}),
}

ROLE_BASE_PERMISSION: Dict[ProjectRole, ProjectPermission] = {
    ProjectRole.OWNER: ProjectPermission.OWNER,
    ProjectRole.MEMBER: ProjectPermission.MEMBER,
    ProjectRole.INVITED: ProjectPermission.INVITED,
    ProjectRole.NONE: ProjectPermission.NONE,
}

# Failing one of these hides the project (404) instead of refusing (403)
EXISTENCE_MASKING_PERMISSIONS: FrozenSet[ProjectPermission] = frozenset(
    {ProjectPermission.OWNER, ProjectPermission.MEMBER}
)


def permissions_for(role: ProjectRole) -> FrozenSet[ProjectPermission]:
    return PROJECT_ROLE_PERMISSIONS[role]


class SiteRole(str, Enum):
    """Site-wide roles carried by the caller's identity"""

    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    USER = "USER"


class SitePermission(str, Enum):
    PROJECT_ALL = "project:all"
    PROJECT_READ = "project:read"
    PROJECT_UPDATE = "project:update"
    USER_ALL = "user:all"
    USER_READ = "user:read"
    ADMIN_ALL = "admin:all"


SITE_ROLE_PERMISSIONS: Dict[SiteRole, FrozenSet[SitePermission]] = {
    SiteRole.ADMIN: frozenset(
        {
            SitePermission.ADMIN_ALL,
            SitePermission.PROJECT_ALL,
            SitePermission.USER_ALL,
        }
    ),
    SiteRole.MODERATOR: frozenset(
        {
            SitePermission.PROJECT_READ,
            SitePermission.PROJECT_UPDATE,
            SitePermission.USER_READ,
        }
    ),
    SiteRole.USER: frozenset(
        {
            SitePermission.PROJECT_READ,
            SitePermission.USER_READ,
        }
    ),
}


def site_permissions_for(roles: Iterable[str]) -> FrozenSet[SitePermission]:
    """Union of permissions for the given role names; unknown names grant nothing"""
    granted = set()
    for name in roles:
        try:
            role = SiteRole(name)
        except ValueError:
            continue
        granted |= SITE_ROLE_PERMISSIONS[role]
    return frozenset(granted)
