from datetime import timedelta

import pytest

from src.app.use_cases.projects import (
    GetProjectAccessUseCase,
    ListPendingInvitationsUseCase,
    ListProjectUsersUseCase,
)
from src.domain.entities import ProjectUserType
from tests.unit.factories import (
    make_caller,
    make_invitation,
    make_membership,
    make_project,
    make_user,
)


@pytest.mark.asyncio
async def test_project_users_merges_members_and_invitations(
    mock_uow, owner, owner_caller, project
):
    client = make_user("client@example.com", name="Casey")
    project.primary_client_id = client.id
    membership = make_membership(project, client, ProjectUserType.client)
    membership.created_at = membership.created_at - timedelta(days=1)
    invitation = make_invitation(project, "guest@example.com", owner.id)

    mock_uow.projects.get_by_id.return_value = project
    mock_uow.memberships.get_by_project_id.return_value = [membership]
    mock_uow.invitations.list_open_by_project.return_value = [invitation]
    mock_uow.users.get_by_ids.return_value = [client]

    result = await ListProjectUsersUseCase(mock_uow).execute(owner_caller, project.id)

    assert result.is_ok()
    response = result.value
    assert response.total == 2
    assert response.total_pages == 1
    # Newest first
    assert [entry.type for entry in response.entries] == ["invitation", "user"]
    assert response.entries[0].email == "guest@example.com"
    assert response.entries[0].invitation.status == "pending"
    assert response.entries[1].is_primary_client is True
    assert response.entries[1].user.email == client.email


@pytest.mark.asyncio
async def test_project_users_paginates(mock_uow, owner, owner_caller, project):
    invitations = [
        make_invitation(project, f"guest{i}@example.com", owner.id, token=f"t{i}")
        for i in range(3)
    ]
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.invitations.list_open_by_project.return_value = invitations

    result = await ListProjectUsersUseCase(mock_uow).execute(
        owner_caller, project.id, page=2, limit=2
    )

    assert result.value.total == 3
    assert result.value.total_pages == 2
    assert len(result.value.entries) == 1


@pytest.mark.asyncio
async def test_invited_user_cannot_list_project_users(mock_uow, owner, project):
    guest = make_user("guest@example.com")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_id.return_value = guest
    mock_uow.invitations.get_open_by_project_and_email.return_value = make_invitation(
        project, guest.email, owner.id
    )

    result = await ListProjectUsersUseCase(mock_uow).execute(make_caller(guest), project.id)

    assert result.error.code == "INSUFFICIENT_PERMISSION"


@pytest.mark.asyncio
@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 101)])
async def test_bad_pagination(mock_uow, owner_caller, project, page, limit):
    result = await ListProjectUsersUseCase(mock_uow).execute(
        owner_caller, project.id, page=page, limit=limit
    )

    assert result.error.code == "INVALID_PAGINATION"


@pytest.mark.asyncio
async def test_pending_inbox_lists_caller_invitations(mock_uow, owner):
    guest = make_user("guest@example.com")
    project_a = make_project(owner, "Alpha")
    project_b = make_project(owner, "Beta")
    invitations = [
        make_invitation(project_a, guest.email, owner.id, token="a"),
        make_invitation(project_b, guest.email, owner.id, token="b"),
    ]
    mock_uow.invitations.list_open_by_email.return_value = (invitations, 2)
    mock_uow.projects.get_by_ids.return_value = [project_a, project_b]
    mock_uow.users.get_by_ids.return_value = [owner]

    result = await ListPendingInvitationsUseCase(mock_uow).execute(make_caller(guest))

    assert result.is_ok()
    response = result.value
    assert response.total == 2
    assert [item.project.name for item in response.invitations] == ["Alpha", "Beta"]
    assert response.invitations[0].invited_by.email == owner.email
    args = mock_uow.invitations.list_open_by_email.call_args.args
    assert args[0] == guest.email
    assert args[2:] == (10, 0)
    assert "token" not in response.invitations[0].model_dump()


@pytest.mark.asyncio
async def test_access_for_owner(mock_uow, owner_caller, project):
    mock_uow.projects.get_by_id.return_value = project

    result = await GetProjectAccessUseCase(mock_uow).execute(owner_caller, project.id)

    assert result.is_ok()
    response = result.value
    assert response.role == "OWNER"
    assert response.permission == "project:owner"
    assert response.is_owner is True
    names = {p.name for p in response.permissions}
    assert "project.users.invite" in names
    invite = next(p for p in response.permissions if p.name == "project.users.invite")
    assert invite.category == "Users"
    assert invite.description == "User can invite other users"


@pytest.mark.asyncio
async def test_access_for_invited_user(mock_uow, owner, project):
    guest = make_user("guest@example.com")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_id.return_value = guest
    mock_uow.invitations.get_open_by_project_and_email.return_value = make_invitation(
        project, guest.email, owner.id
    )

    result = await GetProjectAccessUseCase(mock_uow).execute(make_caller(guest), project.id)

    assert result.value.role == "INVITED"
    assert result.value.is_invited is True
    assert {p.name for p in result.value.permissions} == {
        "project:invited",
        "project.details.view",
    }


@pytest.mark.asyncio
async def test_access_hides_project_from_strangers(mock_uow, project):
    stranger = make_user("stranger@example.com")
    mock_uow.projects.get_by_id.return_value = project

    result = await GetProjectAccessUseCase(mock_uow).execute(
        make_caller(stranger), project.id
    )

    assert result.error.code == "PROJECT_NOT_FOUND"
