import logging
from datetime import timedelta

import pytest

from src.app.repositories.invitation_repository import DuplicateInvitationToken
from src.app.use_cases.projects import InviteProjectUserUseCase
from src.domain.entities import InvitationStatus, ProjectUserType
from tests.unit.factories import make_caller, make_invitation, make_membership, make_user

BASE_URL = "https://app.example.com"


def _use_case(mock_uow, email_sender, views):
    return InviteProjectUserUseCase(mock_uow, email_sender, views, BASE_URL)


@pytest.mark.asyncio
async def test_invite_new_email_creates_pending_invitation(
    mock_uow, email_sender, views, owner_caller, project
):
    mock_uow.projects.get_by_id.return_value = project

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "new@example.com", "Contractor"
    )

    assert result.is_ok()
    response = result.value
    assert response.status == "pending"
    assert response.added_directly is False
    assert response.user_type == "Contractor"

    invitation = mock_uow.invitations.create.call_args.args[0]
    assert invitation.email == "new@example.com"
    assert invitation.user_type == ProjectUserType.contractor
    assert invitation.invited_by_id == owner_caller.user_id
    assert invitation.user_id is None
    lifetime = invitation.expires_at - invitation.created_at
    assert abs(lifetime - timedelta(days=7)) < timedelta(seconds=5)
    assert len(invitation.token) >= 43

    mock_uow.commit.assert_called_once()
    # No account yet, so no in-app notification
    mock_uow.notifications.create.assert_not_called()

    assert len(email_sender.sent) == 1
    sent = email_sender.sent[0]
    assert sent["to"] == "new@example.com"
    assert f"{BASE_URL}/invitations/accept?token={invitation.token}" in sent["text"]
    assert f"project:{project.id}:users" in views.invalidated


@pytest.mark.asyncio
async def test_invite_existing_account_notifies_without_token(
    mock_uow, email_sender, views, owner_caller, project
):
    existing = make_user("sam@example.com", name="Sam")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_email.return_value = existing

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, existing.email, "Employee"
    )

    assert result.is_ok()
    invitation = mock_uow.invitations.create.call_args.args[0]
    assert invitation.user_id == existing.id

    notification = mock_uow.notifications.create.call_args.args[0]
    assert notification.user_id == existing.id
    assert invitation.token not in notification.link
    assert invitation.token not in notification.detail


@pytest.mark.asyncio
async def test_primary_client_shortcut_adds_member_immediately(
    mock_uow, email_sender, views, owner_caller, project
):
    client = make_user("client@example.com", name="Casey Client")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_email.return_value = client

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, client.email, "Client"
    )

    assert result.is_ok()
    assert result.value.added_directly is True
    assert result.value.status == "accepted"

    membership = mock_uow.memberships.create.call_args.args[0]
    assert membership.user_id == client.id
    assert membership.user_type == ProjectUserType.client
    mock_uow.projects.claim_primary_client.assert_called_once_with(project, client.id)
    assert project.primary_client_id == client.id

    invitation = mock_uow.invitations.create.call_args.args[0]
    assert invitation.status == InvitationStatus.accepted
    assert invitation.accepted_at is not None

    # Added directly: no invitation email
    assert email_sender.sent == []
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_no_shortcut_when_primary_client_already_set(
    mock_uow, email_sender, views, owner_caller, project
):
    project.primary_client_id = make_user("first@example.com").id
    client = make_user("client@example.com")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_email.return_value = client

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, client.email, "Client"
    )

    assert result.is_ok()
    assert result.value.added_directly is False
    assert result.value.status == "pending"
    mock_uow.memberships.create.assert_not_called()
    mock_uow.projects.claim_primary_client.assert_not_called()


@pytest.mark.asyncio
async def test_no_shortcut_for_email_without_account(
    mock_uow, email_sender, views, owner_caller, project
):
    mock_uow.projects.get_by_id.return_value = project

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "future-client@example.com", "Client"
    )

    assert result.value.added_directly is False
    mock_uow.memberships.create.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_user_type(mock_uow, email_sender, views, owner_caller, project):
    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "new@example.com", "Manager"
    )

    assert result.is_err()
    assert result.error.code == "INVALID_USER_TYPE"
    mock_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_email(mock_uow, email_sender, views, owner_caller, project):
    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "not-an-email", "Contractor"
    )

    assert result.is_err()
    assert result.error.code == "INVALID_EMAIL"


@pytest.mark.asyncio
async def test_member_cannot_invite(mock_uow, email_sender, views, project):
    member = make_user("member@example.com")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.memberships.get_by_project_and_user.return_value = make_membership(
        project, member
    )

    result = await _use_case(mock_uow, email_sender, views).execute(
        make_caller(member), project.id, "new@example.com", "Contractor"
    )

    assert result.error.code == "INSUFFICIENT_PERMISSION"
    mock_uow.invitations.create.assert_not_called()
    assert email_sender.sent == []


@pytest.mark.asyncio
async def test_existing_member_is_rejected(
    mock_uow, email_sender, views, owner_caller, project
):
    member = make_user("member@example.com")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_email.return_value = member

    async def membership_for(project_id, user_id):
        if user_id == member.id:
            return make_membership(project, member)
        return None

    mock_uow.memberships.get_by_project_and_user.side_effect = membership_for

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, member.email, "Contractor"
    )

    assert result.error.code == "ALREADY_MEMBER"


@pytest.mark.asyncio
async def test_owner_cannot_be_invited(
    mock_uow, email_sender, views, owner, owner_caller, project
):
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_email.return_value = owner

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, owner.email, "Client"
    )

    assert result.error.code == "ALREADY_MEMBER"


@pytest.mark.asyncio
async def test_open_invitation_blocks_a_second(
    mock_uow, email_sender, views, owner, owner_caller, project
):
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.invitations.get_open_by_project_and_email.return_value = make_invitation(
        project, "new@example.com", owner.id
    )

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "new@example.com", "Contractor"
    )

    assert result.error.code == "INVITE_ALREADY_EXISTS"
    mock_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_token_collisions_exhaust_attempts(
    mock_uow, email_sender, views, owner, owner_caller, project
):
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.invitations.get_by_token.return_value = make_invitation(
        project, "someone@example.com", owner.id
    )

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "new@example.com", "Contractor"
    )

    assert result.error.code == "TOKEN_GENERATION_FAILED"
    assert mock_uow.invitations.get_by_token.call_count == InviteProjectUserUseCase.TOKEN_ATTEMPTS


@pytest.mark.asyncio
async def test_site_admin_can_invite(mock_uow, email_sender, views, project):
    admin = make_user("admin@example.com")
    mock_uow.projects.get_by_id.return_value = project

    result = await _use_case(mock_uow, email_sender, views).execute(
        make_caller(admin, roles=["ADMIN"]), project.id, "new@example.com", "Legal"
    )

    assert result.is_ok()
    assert mock_uow.invitations.create.call_args.args[0].invited_by_id == admin.id


@pytest.mark.asyncio
async def test_token_is_never_logged(
    mock_uow, email_sender, views, owner_caller, project, caplog
):
    mock_uow.projects.get_by_id.return_value = project

    with caplog.at_level(logging.INFO, logger="src"):
        result = await _use_case(mock_uow, email_sender, views).execute(
            owner_caller, project.id, "new@example.com", "Contractor"
        )

    assert result.is_ok()
    token = mock_uow.invitations.create.call_args.args[0].token
    assert caplog.records
    for record in caplog.records:
        assert token not in record.getMessage()


@pytest.mark.asyncio
async def test_shortcut_lost_to_concurrent_designation_falls_back_to_invitation(
    mock_uow, email_sender, views, owner_caller, project
):
    client = make_user("client@example.com")
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.users.get_by_email.return_value = client
    mock_uow.projects.claim_primary_client.side_effect = None
    mock_uow.projects.claim_primary_client.return_value = False

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, client.email, "Client"
    )

    assert result.is_ok()
    assert result.value.added_directly is False
    assert result.value.status == "pending"
    mock_uow.memberships.create.assert_not_called()
    assert mock_uow.invitations.create.call_args.args[0].status == InvitationStatus.pending
    assert len(email_sender.sent) == 1


@pytest.mark.asyncio
async def test_token_taken_at_insert_restarts_with_fresh_token(
    mock_uow, email_sender, views, owner_caller, project
):
    mock_uow.projects.get_by_id.return_value = project
    created = []

    async def create(invitation):
        created.append(invitation)
        if len(created) == 1:
            raise DuplicateInvitationToken()
        return invitation

    mock_uow.invitations.create.side_effect = create

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "new@example.com", "Contractor"
    )

    assert result.is_ok()
    assert len(created) == 2
    assert created[0].token != created[1].token
    assert result.value.invite_id == str(created[1].id)
    mock_uow.commit.assert_called_once()
    assert len(email_sender.sent) == 1
    assert created[1].token in email_sender.sent[0]["text"]


@pytest.mark.asyncio
async def test_token_taken_at_every_insert_fails(
    mock_uow, email_sender, views, owner_caller, project
):
    mock_uow.projects.get_by_id.return_value = project
    mock_uow.invitations.create.side_effect = DuplicateInvitationToken()

    result = await _use_case(mock_uow, email_sender, views).execute(
        owner_caller, project.id, "new@example.com", "Contractor"
    )

    assert result.error.code == "TOKEN_GENERATION_FAILED"
    assert mock_uow.invitations.create.call_count == InviteProjectUserUseCase.TOKEN_ATTEMPTS
    mock_uow.commit.assert_not_called()
    assert email_sender.sent == []
