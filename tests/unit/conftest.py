from typing import Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest

from src.domain.entities import Project
from tests.unit.factories import (
    RecordingEmailSender,
    RecordingViewInvalidator,
    make_caller,
    make_project,
    make_user,
)


def _set_primary(project: Project, user_id: Optional[UUID]) -> Project:
    project.primary_client_id = user_id
    return project


def _claim_primary(project: Project, user_id: UUID) -> bool:
    if project.primary_client_id is not None:
        return False
    project.primary_client_id = user_id
    return True


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories; nothing exists until a test says so"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_ids = AsyncMock(return_value=[])
    uow.users.get_by_email = AsyncMock(return_value=None)

    uow.projects = MagicMock()
    uow.projects.get_by_id = AsyncMock(return_value=None)
    uow.projects.get_by_ids = AsyncMock(return_value=[])
    uow.projects.set_primary_client = AsyncMock(side_effect=_set_primary)
    uow.projects.claim_primary_client = AsyncMock(side_effect=_claim_primary)

    uow.memberships = MagicMock()
    uow.memberships.get_by_project_and_user = AsyncMock(return_value=None)
    uow.memberships.get_by_project_id = AsyncMock(return_value=[])
    uow.memberships.create = AsyncMock(side_effect=lambda membership: membership)
    uow.memberships.delete = AsyncMock()

    uow.invitations = MagicMock()
    uow.invitations.get_by_id = AsyncMock(return_value=None)
    uow.invitations.get_by_token = AsyncMock(return_value=None)
    uow.invitations.get_open_by_project_and_email = AsyncMock(return_value=None)
    uow.invitations.list_open_by_project = AsyncMock(return_value=[])
    uow.invitations.list_open_by_email = AsyncMock(return_value=([], 0))
    uow.invitations.create = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.transition = AsyncMock(return_value=True)

    uow.notifications = MagicMock()
    uow.notifications.create = AsyncMock(side_effect=lambda notification: notification)

    return uow


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def views():
    return RecordingViewInvalidator()


@pytest.fixture
def owner():
    return make_user("owner@example.com", name="Olivia Owner")


@pytest.fixture
def project(owner):
    return make_project(owner)


@pytest.fixture
def owner_caller(owner):
    return make_caller(owner)
