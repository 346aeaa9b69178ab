from abc import ABC, abstractmethod

from src.domain.entities import Notification


class INotificationRepository(ABC):
    """Notification repository interface - application layer"""

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Create a new notification"""
        pass
