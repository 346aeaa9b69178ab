from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from libs.result import Error
from src.api.error import ClientError, raise_for_error
from src.app.services.email_sender import IEmailSender
from src.app.services.project_access_guard import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.view_invalidator import IViewInvalidator
from src.app.use_cases.projects import (
    GetProjectAccessUseCase,
    InviteProjectUserResponse,
    InviteProjectUserUseCase,
    ListProjectUsersResponse,
    ListProjectUsersUseCase,
    ProjectAccessResponse,
    RemoveProjectUserResponse,
    RemoveProjectUserUseCase,
    SetPrimaryClientResponse,
    SetPrimaryClientUseCase,
)
from src.depends import (
    get_app_base_url,
    get_current_caller,
    get_email_sender,
    get_unit_of_work,
    get_view_invalidator,
)

router = APIRouter(prefix="/projects", tags=["Projects"])


class InviteProjectUserRequest(BaseModel):
    """
    Invite project user HTTP request payload

    Email format and user type are checked by the use case so that both
    come back with their own error codes.
    """

    email: str = Field(..., description="Email address to invite")
    user_type: str = Field(
        ..., description="Membership type: Client, Contractor, Employee or Legal"
    )


class SetPrimaryClientRequest(BaseModel):
    user_id: Optional[str] = Field(
        None, description="Client member to designate; null clears the designation"
    )


def _parse_uuid(value: str, code: str, label: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise ClientError(
            Error(code, f"Invalid {label} ID format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


@router.get(
    "/{project_id}/access",
    status_code=status.HTTP_200_OK,
    response_model=ProjectAccessResponse,
)
async def get_project_access(
    project_id: str,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get Project Access

    Returns the caller's role and permission set on the project.

    Raises:
        - 400 Bad Request: INVALID_PROJECT_ID
        - 401 Unauthorized: UNAUTHENTICATED
        - 404 Not Found: PROJECT_NOT_FOUND (also when the caller has no access)
    """
    project_uuid = _parse_uuid(project_id, "INVALID_PROJECT_ID", "project")

    use_case = GetProjectAccessUseCase(uow)
    result = await use_case.execute(caller, project_uuid)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{project_id}/users",
    status_code=status.HTTP_200_OK,
    response_model=ListProjectUsersResponse,
)
async def list_project_users(
    project_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Project Users

    Members and open invitations, newest first.

    Raises:
        - 400 Bad Request: INVALID_PROJECT_ID, INVALID_PAGINATION
        - 401 Unauthorized: UNAUTHENTICATED
        - 403 Forbidden: INSUFFICIENT_PERMISSION
        - 404 Not Found: PROJECT_NOT_FOUND
    """
    project_uuid = _parse_uuid(project_id, "INVALID_PROJECT_ID", "project")

    use_case = ListProjectUsersUseCase(uow)
    result = await use_case.execute(caller, project_uuid, page=page, limit=limit)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{project_id}/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=InviteProjectUserResponse,
)
async def invite_project_user(
    project_id: str,
    request: InviteProjectUserRequest,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
    views: IViewInvalidator = Depends(get_view_invalidator),
    base_url: str = Depends(get_app_base_url),
):
    """
    Invite Project User

    Sends an invitation, or adds an existing account straight away as the
    primary client when the project has none and the type is Client.

    Raises:
        - 400 Bad Request: INVALID_PROJECT_ID, INVALID_EMAIL, INVALID_USER_TYPE
        - 401 Unauthorized: UNAUTHENTICATED
        - 403 Forbidden: INSUFFICIENT_PERMISSION
        - 404 Not Found: PROJECT_NOT_FOUND
        - 409 Conflict: ALREADY_MEMBER, INVITE_ALREADY_EXISTS
        - 500 Internal Server Error: TOKEN_GENERATION_FAILED
    """
    project_uuid = _parse_uuid(project_id, "INVALID_PROJECT_ID", "project")

    use_case = InviteProjectUserUseCase(uow, email_sender, views, base_url)
    result = await use_case.execute(
        caller, project_uuid, request.email, request.user_type
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{project_id}/users/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=RemoveProjectUserResponse,
)
async def remove_project_user(
    project_id: str,
    user_id: str,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
    views: IViewInvalidator = Depends(get_view_invalidator),
):
    """
    Remove Project User

    Raises:
        - 400 Bad Request: INVALID_PROJECT_ID, INVALID_USER_ID
        - 401 Unauthorized: UNAUTHENTICATED
        - 403 Forbidden: INSUFFICIENT_PERMISSION
        - 404 Not Found: PROJECT_NOT_FOUND, MEMBERSHIP_NOT_FOUND
        - 409 Conflict: CANNOT_REMOVE_OWNER
    """
    project_uuid = _parse_uuid(project_id, "INVALID_PROJECT_ID", "project")
    user_uuid = _parse_uuid(user_id, "INVALID_USER_ID", "user")

    use_case = RemoveProjectUserUseCase(uow, email_sender, views)
    result = await use_case.execute(caller, project_uuid, user_uuid)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.put(
    "/{project_id}/primary-client",
    status_code=status.HTTP_200_OK,
    response_model=SetPrimaryClientResponse,
)
async def set_primary_client(
    project_id: str,
    request: SetPrimaryClientRequest,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    views: IViewInvalidator = Depends(get_view_invalidator),
):
    """
    Set Primary Client

    Raises:
        - 400 Bad Request: INVALID_PROJECT_ID, INVALID_USER_ID
        - 401 Unauthorized: UNAUTHENTICATED
        - 403 Forbidden: INSUFFICIENT_PERMISSION
        - 404 Not Found: PROJECT_NOT_FOUND, MEMBERSHIP_NOT_FOUND
        - 422 Unprocessable Entity: NOT_A_CLIENT
    """
    project_uuid = _parse_uuid(project_id, "INVALID_PROJECT_ID", "project")
    user_uuid = None
    if request.user_id is not None:
        user_uuid = _parse_uuid(request.user_id, "INVALID_USER_ID", "user")

    use_case = SetPrimaryClientUseCase(uow, views)
    result = await use_case.execute(caller, project_uuid, user_uuid)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
