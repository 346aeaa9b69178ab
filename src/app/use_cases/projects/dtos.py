"""
Project Access Use Case DTOs (Data Transfer Objects)

All Response classes for the project access domain.
Provides type safety and clear contracts between layers.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel


# ============================================================================
# Shared
# ============================================================================


class ProjectRef(BaseModel):
    """Minimal project reference for navigation"""

    id: str
    name: str


class UserInfo(BaseModel):
    """Public user details"""

    id: str
    name: Optional[str] = None
    email: str


# ============================================================================
# Response DTOs
# ============================================================================


class InviteProjectUserResponse(BaseModel):
    """Response for invite project user use case"""

    invite_id: str
    status: str
    email: str
    user_type: str
    expires_at: str
    added_directly: bool
    message: str


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    status: str
    already_member: bool
    project: ProjectRef
    message: str


class CancelInvitationResponse(BaseModel):
    """Response for cancel invitation use case"""

    status: str


class SetPrimaryClientResponse(BaseModel):
    """Response for set primary client use case"""

    project_id: str
    primary_client_id: Optional[str] = None
    message: str


class RemoveProjectUserResponse(BaseModel):
    """Response for remove project user use case"""

    status: str
    primary_client_cleared: bool


class InvitationInfo(BaseModel):
    id: str
    status: str
    expires_at: str


class ProjectUserEntry(BaseModel):
    """One row of the project users list - a member or an open invitation"""

    type: Literal["user", "invitation"]
    id: str
    user: Optional[UserInfo] = None
    user_type: str
    email: str
    created_at: str
    is_primary_client: bool = False
    invitation: Optional[InvitationInfo] = None


class ListProjectUsersResponse(BaseModel):
    """Response for list project users use case"""

    entries: List[ProjectUserEntry]
    total: int
    page: int
    limit: int
    total_pages: int


class PendingInvitation(BaseModel):
    """An open invitation addressed to the caller"""

    id: str
    project: ProjectRef
    invited_by: Optional[UserInfo] = None
    user_type: str
    expires_at: str
    created_at: str


class ListPendingInvitationsResponse(BaseModel):
    """Response for list pending invitations use case"""

    invitations: List[PendingInvitation]
    total: int
    page: int
    limit: int
    total_pages: int


class PermissionInfo(BaseModel):
    name: str
    description: str
    category: Optional[str] = None


class ProjectAccessResponse(BaseModel):
    """Response for get project access use case"""

    project: ProjectRef
    role: str
    permission: str
    permissions: List[PermissionInfo]
    is_owner: bool
    is_member: bool
    is_invited: bool
    via_site_admin: bool
    user_type: Optional[str] = None
