"""
Project Access Use Cases

Invitation lifecycle, membership and primary client management.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .cancel_invitation_use_case import CancelInvitationUseCase
from .dtos import (
    AcceptInvitationResponse,
    CancelInvitationResponse,
    InviteProjectUserResponse,
    ListPendingInvitationsResponse,
    ListProjectUsersResponse,
    ProjectAccessResponse,
    RemoveProjectUserResponse,
    SetPrimaryClientResponse,
)
from .get_project_access_use_case import GetProjectAccessUseCase
from .invite_project_user_use_case import InviteProjectUserUseCase
from .list_pending_invitations_use_case import ListPendingInvitationsUseCase
from .list_project_users_use_case import ListProjectUsersUseCase
from .remove_project_user_use_case import RemoveProjectUserUseCase
from .set_primary_client_use_case import SetPrimaryClientUseCase

__all__ = [
    "InviteProjectUserUseCase",
    "AcceptInvitationUseCase",
    "CancelInvitationUseCase",
    "SetPrimaryClientUseCase",
    "RemoveProjectUserUseCase",
    "ListProjectUsersUseCase",
    "ListPendingInvitationsUseCase",
    "GetProjectAccessUseCase",
    "InviteProjectUserResponse",
    "AcceptInvitationResponse",
    "CancelInvitationResponse",
    "SetPrimaryClientResponse",
    "RemoveProjectUserResponse",
    "ListProjectUsersResponse",
    "ListPendingInvitationsResponse",
    "ProjectAccessResponse",
]
