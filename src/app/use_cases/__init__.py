"""
Use Cases

Organized into domain folders:
- projects/: Project access, invitations and membership

Import from subdirectories for better organization.
"""

from .projects import (
    AcceptInvitationUseCase,
    CancelInvitationUseCase,
    GetProjectAccessUseCase,
    InviteProjectUserUseCase,
    ListPendingInvitationsUseCase,
    ListProjectUsersUseCase,
    RemoveProjectUserUseCase,
    SetPrimaryClientUseCase,
)

__all__ = [
    "InviteProjectUserUseCase",
    "AcceptInvitationUseCase",
    "CancelInvitationUseCase",
    "SetPrimaryClientUseCase",
    "RemoveProjectUserUseCase",
    "ListProjectUsersUseCase",
    "ListPendingInvitationsUseCase",
    "GetProjectAccessUseCase",
]
