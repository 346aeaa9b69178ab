"""
Project Access Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import InvitationStatus, ProjectUserType

# Export all entities
from .user import User
from .project import Project
from .membership import Membership
from .invitation import (
    INVITATION_TTL,
    Accepted,
    Cancelled,
    InvalidInvitationTransition,
    Invitation,
    InvitationState,
    Pending,
)
from .notification import Notification

__all__ = [
    # Enums
    "InvitationStatus",
    "ProjectUserType",
    # Entities
    "User",
    "Project",
    "Membership",
    "Invitation",
    "Notification",
    # Invitation state
    "INVITATION_TTL",
    "InvitationState",
    "Pending",
    "Accepted",
    "Cancelled",
    "InvalidInvitationTransition",
]
