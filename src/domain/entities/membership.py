"""
Membership Entity

Links a User to a Project with a membership type.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from src.domain.base import utc_now

from .enums import ProjectUserType

if TYPE_CHECKING:
    from .project import Project


class Membership(SQLModel, table=True):
    """
    Membership entity - a user's seat on a project.

    Business Rules:
    - (project_id, user_id) must be unique
    - Existence alone makes the user a MEMBER; there is no soft state
    - Created on invitation acceptance or by the primary-client shortcut
    - Hard-deleted when the user is removed from the project
    """

    __tablename__ = "project_users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    user_type: ProjectUserType = Field(nullable=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    # Relationships
    project: "Project" = Relationship(back_populates="memberships")

    __table_args__ = (
        Index("idx_project_user_project_user", "project_id", "user_id", unique=True),
    )
