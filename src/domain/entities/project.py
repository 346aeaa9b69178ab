"""
Project Entity

A workspace shared between its owner and its members.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

from src.domain.base import utc_now

if TYPE_CHECKING:
    from .membership import Membership


class Project(SQLModel, table=True):
    """
    Project entity - a collaboration space with exactly one owner.

    Business Rules:
    - owner_user_id is immutable; ownership never needs a membership row
    - primary_client_id, when set, points at a Client-type member
    - Created and deleted by the projects service, not here
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)

    owner_user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    primary_client_id: Optional[UUID] = Field(default=None, foreign_key="users.id")

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="project")
