"""
Project Access Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class ProjectUserType(str, Enum):
    """Membership type a user holds on a project"""

    client = "Client"
    contractor = "Contractor"
    employee = "Employee"
    legal = "Legal"


class InvitationStatus(str, Enum):
    """Persisted invitation status"""

    pending = "pending"
    accepted = "accepted"
    cancelled = "cancelled"
