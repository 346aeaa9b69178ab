from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import (
    build_engine,
    get_email_sender,
    get_unit_of_work,
    get_view_invalidator,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import generate_jwt
from src.domain.entities import Project, User
from tests.unit.factories import RecordingEmailSender, RecordingViewInvalidator


@dataclass(frozen=True)
class SeededUser:
    """Plain copy of a seeded user; ORM rows expire when a request rolls back"""

    id: UUID
    email: str
    name: Optional[str]

    def headers(self, *roles: str) -> dict:
        token = generate_jwt(self.id, self.email, self.name, roles)
        return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def email_sender():
    return RecordingEmailSender()


@pytest_asyncio.fixture
def views():
    return RecordingViewInvalidator()


@pytest_asyncio.fixture
async def client(db_session, email_sender, views):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_view_invalidator] = lambda: views

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
def create_user(db_session):
    async def _create(email: str, name: Optional[str] = None) -> SeededUser:
        user = User(email=email, name=name)
        db_session.add(user)
        await db_session.commit()
        return SeededUser(id=user.id, email=user.email, name=user.name)

    return _create


@pytest_asyncio.fixture
async def owner(create_user):
    return await create_user("owner@example.com", "Olivia Owner")


@pytest_asyncio.fixture
async def project_id(db_session, owner) -> UUID:
    project = Project(name="Harbor Tower", owner_user_id=owner.id)
    db_session.add(project)
    await db_session.commit()
    return project.id
