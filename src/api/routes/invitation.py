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
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    CancelInvitationResponse,
    CancelInvitationUseCase,
    ListPendingInvitationsResponse,
    ListPendingInvitationsUseCase,
)
from src.depends import (
    get_app_base_url,
    get_current_caller,
    get_email_sender,
    get_unit_of_work,
    get_view_invalidator,
)

router = APIRouter(prefix="/invitations", tags=["Invitations"])


class AcceptInvitationRequest(BaseModel):
    """
    Accept invitation HTTP request payload

    Validates incoming request for accepting an invitation.
    """

    token: str = Field("", description="Invitation token from the email link")


@router.get(
    "/pending",
    status_code=status.HTTP_200_OK,
    response_model=ListPendingInvitationsResponse,
)
async def list_pending_invitations(
    page: int = Query(1),
    limit: int = Query(10),
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Pending Invitations

    Open invitations addressed to the caller's email, newest first.

    Raises:
        - 400 Bad Request: INVALID_PAGINATION
        - 401 Unauthorized: UNAUTHENTICATED
    """
    use_case = ListPendingInvitationsUseCase(uow)
    result = await use_case.execute(caller, page=page, limit=limit)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/accept",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    request: AcceptInvitationRequest,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
    views: IViewInvalidator = Depends(get_view_invalidator),
    base_url: str = Depends(get_app_base_url),
):
    """
    Accept Invitation

    Joins the caller to the invitation's project. Accepting while already on
    the project succeeds with already_member = true.

    Raises:
        - 400 Bad Request: TOKEN_REQUIRED
        - 401 Unauthorized: UNAUTHENTICATED
        - 403 Forbidden: EMAIL_MISMATCH
        - 404 Not Found: INVITATION_NOT_FOUND, PROJECT_NOT_FOUND
        - 409 Conflict: INVITATION_ALREADY_RESOLVED
        - 410 Gone: INVITATION_EXPIRED
    """
    use_case = AcceptInvitationUseCase(uow, email_sender, views, base_url)
    result = await use_case.execute(caller, request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=CancelInvitationResponse,
)
async def cancel_invitation(
    invitation_id: str,
    caller: Caller = Depends(get_current_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    views: IViewInvalidator = Depends(get_view_invalidator),
):
    """
    Cancel Invitation

    Only the project owner can cancel, and only while the invitation is pending.

    Raises:
        - 400 Bad Request: Invalid invitation_id format
        - 401 Unauthorized: UNAUTHENTICATED
        - 404 Not Found: INVITATION_NOT_FOUND, PROJECT_NOT_FOUND (not the owner)
        - 409 Conflict: INVITATION_ALREADY_RESOLVED
    """
    try:
        invitation_uuid = UUID(invitation_id)
    except ValueError:
        raise ClientError(
            Error("INVALID_INVITATION_ID", "Invalid invitation ID format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    use_case = CancelInvitationUseCase(uow, views)
    result = await use_case.execute(caller, invitation_uuid)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
