from abc import ABC, abstractmethod

from src.app.repositories.invitation_repository import IInvitationRepository
from src.app.repositories.membership_repository import IMembershipRepository
from src.app.repositories.notification_repository import INotificationRepository
from src.app.repositories.project_repository import IProjectRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    projects: IProjectRepository
    memberships: IMembershipRepository
    invitations: IInvitationRepository
    notifications: INotificationRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
