"""
User Entity

Identity record owned by the authentication service.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now


class User(SQLModel, table=True):
    """
    User entity - a person who can own or join projects.

    Business Rules:
    - Email must be unique across all users
    - Written by the authentication service, only read here
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: Optional[str] = Field(default=None, max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    @property
    def display_name(self) -> str:
        return self.name or self.email
