import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, update

from src.adapter.repositories.invitation_repository import InvitationRepository
from src.adapter.repositories.project_repository import ProjectRepository
from src.app.repositories.invitation_repository import DuplicateInvitationToken
from src.domain.base import utc_now
from src.domain.entities import Accepted, Invitation, InvitationStatus, Project
from tests.unit.factories import make_invitation


async def _fresh(db_session, model, row_id):
    stmt = (
        select(model)
        .where(model.id == row_id)
        .execution_options(populate_existing=True)
    )
    return (await db_session.exec(stmt)).one()


@pytest.mark.asyncio
async def test_create_reports_duplicate_token(db_session, owner, project_id):
    project = await db_session.get(Project, project_id)
    first = make_invitation(project, "a@example.com", owner.id, token="shared-token")
    second = make_invitation(project, "b@example.com", owner.id, token="shared-token")
    repository = InvitationRepository(db_session)

    await repository.create(first)
    await db_session.commit()

    with pytest.raises(DuplicateInvitationToken):
        await repository.create(second)

    rows = (await db_session.exec(select(Invitation))).all()
    assert [row.email for row in rows] == ["a@example.com"]


@pytest.mark.asyncio
async def test_database_error_text_hides_parameters(db_session, owner, project_id):
    project = await db_session.get(Project, project_id)
    first = make_invitation(project, "a@example.com", owner.id, token="first-secret-token")
    repository = InvitationRepository(db_session)
    await repository.create(first)
    await db_session.commit()
    db_session.expunge_all()

    clash = make_invitation(project, "b@example.com", owner.id, token="second-secret-token")
    clash.id = first.id

    with pytest.raises(IntegrityError) as exc_info:
        await repository.create(clash)

    assert "second-secret-token" not in str(exc_info.value)
    assert "hide_parameters" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transition_skips_row_resolved_elsewhere(engine, db_session, owner, project_id):
    project = await db_session.get(Project, project_id)
    invitation = make_invitation(project, "a@example.com", owner.id)
    repository = InvitationRepository(db_session)
    await repository.create(invitation)
    await db_session.commit()

    async with engine.begin() as conn:
        await conn.execute(
            update(Invitation)
            .where(Invitation.id == invitation.id)
            .values(status=InvitationStatus.cancelled)
        )

    moved = await repository.transition(
        invitation, Accepted(accepted_at=utc_now()), user_id=owner.id
    )

    assert moved is False
    stored = await _fresh(db_session, Invitation, invitation.id)
    assert stored.status == InvitationStatus.cancelled
    assert stored.user_id is None


@pytest.mark.asyncio
async def test_claim_primary_client_only_once(db_session, project_id, create_user):
    first = await create_user("first@example.com")
    second = await create_user("second@example.com")
    repository = ProjectRepository(db_session)
    project = await repository.get_by_id(project_id)

    assert await repository.claim_primary_client(project, first.id) is True
    assert project.primary_client_id == first.id
    await db_session.commit()

    assert await repository.claim_primary_client(project, second.id) is False
    await db_session.commit()
    assert (await _fresh(db_session, Project, project_id)).primary_client_id == first.id


@pytest.mark.asyncio
async def test_inbox_skips_invitations_without_a_project(db_session, owner, project_id):
    project = await db_session.get(Project, project_id)
    orphan_project = Project(name="Gone", owner_user_id=owner.id)
    live = make_invitation(project, "guest@example.com", owner.id, token="live")
    orphan = make_invitation(orphan_project, "guest@example.com", owner.id, token="orphan")
    db_session.add(live)
    db_session.add(orphan)
    await db_session.commit()

    rows, total = await InvitationRepository(db_session).list_open_by_email(
        "guest@example.com", utc_now(), 10, 0
    )

    assert [row.id for row in rows] == [live.id]
    assert total == 1
