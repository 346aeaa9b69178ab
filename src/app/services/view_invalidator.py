from abc import ABC, abstractmethod
from typing import Iterable
from uuid import UUID


def project_view(project_id: UUID) -> str:
    return f"project:{project_id}"


def project_users_view(project_id: UUID) -> str:
    return f"project:{project_id}:users"


def invitations_inbox_view(email: str) -> str:
    return f"user:{email}:invitations"


def notifications_view(user_id: UUID) -> str:
    return f"user:{user_id}:notifications"


class IViewInvalidator(ABC):
    """Told which logical views went stale after a committed change"""

    @abstractmethod
    async def invalidate(self, views: Iterable[str]) -> None:
        pass
