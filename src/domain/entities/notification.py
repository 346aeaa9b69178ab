"""
Notification Entity

In-app notifications shown to a user.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class Notification(SQLModel, table=True):
    """
    Notification entity - fire-and-forget message for a single user.

    Business Rules:
    - Written in the same transaction as the change it announces
    - detail is markdown, link is an in-app path
    """

    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    title: str = Field(max_length=255)
    subtitle: str = Field(max_length=500)
    detail: str
    link: str = Field(max_length=500)
    read: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_notification_user_read", "user_id", "read"),)
