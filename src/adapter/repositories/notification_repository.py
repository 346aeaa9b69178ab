from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.notification_repository import INotificationRepository
from src.domain.entities import Notification


class NotificationRepository(INotificationRepository):
    """Notification repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, notification: Notification) -> Notification:
        """Create a new notification"""
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification
