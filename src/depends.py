from uuid import UUID

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.email_sender import HttpEmailSender, LoggingEmailSender
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.view_invalidator import LoggingViewInvalidator
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.email_sender import IEmailSender
from src.app.services.project_access_guard import Caller
from src.app.services.view_invalidator import IViewInvalidator


def build_engine(db_uri: str) -> AsyncEngine:
    # Bound values include invitation tokens; they must stay out of logged SQL and error text
    return create_async_engine(db_uri, echo=False, future=True, hide_parameters=True)


engine = build_engine(ApplicationConfig.DB_URI)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

view_invalidator = LoggingViewInvalidator()

UNAUTHENTICATED = Error("UNAUTHENTICATED", "Authentication required")


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_email_sender() -> IEmailSender:
    if ApplicationConfig.EMAIL_BACKEND == "http":
        return HttpEmailSender(
            api_url=ApplicationConfig.EMAIL_API_URL,
            api_key=ApplicationConfig.EMAIL_API_KEY,
            sender=ApplicationConfig.EMAIL_FROM,
            timeout=ApplicationConfig.EMAIL_TIMEOUT_SECONDS,
        )
    return LoggingEmailSender()


def get_view_invalidator() -> IViewInvalidator:
    return view_invalidator


def get_app_base_url() -> str:
    return ApplicationConfig.APP_BASE_URL


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Caller:
    """
    Dependency to extract and verify the caller from the Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Caller built from the JWT payload (user_id, email, name, roles)

    Raises:
        ClientError: 401 UNAUTHENTICATED if the token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(UNAUTHENTICATED, status_code=status.HTTP_401_UNAUTHORIZED)

    payload = verify_jwt(credentials.credentials)
    if payload is None or not payload.get("user_id") or not payload.get("email"):
        raise ClientError(UNAUTHENTICATED, status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        user_id = UUID(payload["user_id"])
    except ValueError:
        raise ClientError(UNAUTHENTICATED, status_code=status.HTTP_401_UNAUTHORIZED)

    return Caller(
        user_id=user_id,
        email=payload["email"],
        name=payload.get("name"),
        roles=tuple(payload.get("roles") or ()),
    )
