from fastapi import status

from src.domain.result import Error

UNAUTHORIZED_CODES = {
    "UNAUTHENTICATED",
    "INVALID_CREDENTIALS",
    "INVALID_TOKEN",
}

FORBIDDEN_CODES = {
    "INSUFFICIENT_ROLE",
    "CANNOT_MODIFY_SELF",
    "SUPER_ADMIN_REQUIRED",
}

BAD_REQUEST_CODES = {
    "VALIDATION_ERROR",
    "INVALID_PASSWORD",
    "INVALID_CURRENT_PASSWORD",
    "INVALID_RESET_TOKEN",
}

CONFLICT_CODES = {
    "EMAIL_ALREADY_EXISTS",
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def status_for(error: Error) -> int:
    """HTTP status for an application error code; unknown codes are server errors."""
    if error.code in UNAUTHORIZED_CODES:
        return status.HTTP_401_UNAUTHORIZED
    if error.code in FORBIDDEN_CODES:
        return status.HTTP_403_FORBIDDEN
    if error.code in BAD_REQUEST_CODES:
        return status.HTTP_400_BAD_REQUEST
    if error.code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    if error.code in CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_exception(error: Error) -> Exception:
    status_code = status_for(error)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ServerError(error)
    return ClientError(error, status_code)
