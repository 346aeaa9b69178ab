from typing import NoReturn

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


ERROR_STATUS = {
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_EMAIL": status.HTTP_400_BAD_REQUEST,
    "INVALID_USER_TYPE": status.HTTP_400_BAD_REQUEST,
    "TOKEN_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "INVALID_PROJECT_ID": status.HTTP_400_BAD_REQUEST,
    "INVALID_USER_ID": status.HTTP_400_BAD_REQUEST,
    "INVALID_INVITATION_ID": status.HTTP_400_BAD_REQUEST,
    "INVALID_PAGINATION": status.HTTP_400_BAD_REQUEST,
    "INSUFFICIENT_PERMISSION": status.HTTP_403_FORBIDDEN,
    "EMAIL_MISMATCH": status.HTTP_403_FORBIDDEN,
    "PROJECT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVITATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "MEMBERSHIP_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ALREADY_MEMBER": status.HTTP_409_CONFLICT,
    "INVITE_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "CANNOT_REMOVE_OWNER": status.HTTP_409_CONFLICT,
    "INVITATION_ALREADY_RESOLVED": status.HTTP_409_CONFLICT,
    "INVITATION_EXPIRED": status.HTTP_410_GONE,
    "NOT_A_CLIENT": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def raise_for_error(error: Error) -> NoReturn:
    """Raise the HTTP error matching a use case error code; unknown codes are 500"""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
