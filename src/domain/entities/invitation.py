"""
Invitation Entity

Token-bearing, time-limited offers to join a project.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import InvitationStatus, ProjectUserType

INVITATION_TTL = timedelta(days=7)


@dataclass(frozen=True)
class Pending:
    status = InvitationStatus.pending
    accepted_at = None


@dataclass(frozen=True)
class Accepted:
    accepted_at: datetime
    status = InvitationStatus.accepted


@dataclass(frozen=True)
class Cancelled:
    status = InvitationStatus.cancelled
    accepted_at = None


InvitationState = Union[Pending, Accepted, Cancelled]


class InvalidInvitationTransition(Exception):
    """Raised when a transition would leave a terminal state"""

    def __init__(self, current: InvitationState, target: InvitationState):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move invitation from {current.status.value} to {target.status.value}"
        )


def ensure_transition(current: InvitationState, target: InvitationState) -> None:
    # pending -> accepted | cancelled; both terminal
    if not isinstance(current, Pending) or isinstance(target, Pending):
        raise InvalidInvitationTransition(current, target)


class Invitation(SQLModel, table=True):
    """
    Invitation entity - offer for an email address to join a project.

    Business Rules:
    - Created by a user holding project.users.invite
    - Expires 7 days after creation; expiry is computed, never written
    - Token is single-use, cryptographically secure and never logged
    - status moves pending -> accepted | cancelled and never back
    - accepted_at is set iff status is accepted
    - Never deleted; kept as an audit trail
    """

    __tablename__ = "project_invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)
    # Resolved eagerly when an account already exists; not a live contract
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id")

    user_type: ProjectUserType = Field(nullable=False)
    token: str = Field(unique=True, index=True, max_length=64)

    status: InvitationStatus = Field(default=InvitationStatus.pending)
    invited_by_id: UUID = Field(foreign_key="users.id", nullable=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invitation_project_email", "project_id", "email"),
        Index("idx_invitation_status_expires_at", "status", "expires_at"),
        CheckConstraint(
            "(status = 'accepted') = (accepted_at IS NOT NULL)",
            name="ck_invitation_accepted_at",
        ),
    )

    @property
    def state(self) -> InvitationState:
        if self.status == InvitationStatus.pending:
            return Pending()
        if self.status == InvitationStatus.cancelled:
            return Cancelled()
        if self.accepted_at is None:
            raise ValueError(f"Invitation {self.id} is accepted without accepted_at")
        return Accepted(accepted_at=self.accepted_at)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_open(self, now: datetime) -> bool:
        """Pending and not yet expired - the only invitations anyone can see"""
        return isinstance(self.state, Pending) and not self.is_expired(now)

    def move_to(self, target: InvitationState) -> None:
        """Apply a legal transition to this in-memory row"""
        ensure_transition(self.state, target)
        self.status = target.status
        self.accepted_at = target.accepted_at
