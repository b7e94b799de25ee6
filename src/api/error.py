from fastapi import status
from src.libs.result import Error

# Application error code -> HTTP status; unlisted codes are server errors
STATUS_BY_CODE = {
    "DUPLICATE_EMAIL": status.HTTP_400_BAD_REQUEST,
    "DUPLICATE_USERNAME": status.HTTP_400_BAD_REQUEST,
    "INVALID_TOKEN": status.HTTP_400_BAD_REQUEST,
    "TWO_FACTOR_NOT_SET_UP": status.HTTP_400_BAD_REQUEST,
    "TWO_FACTOR_ALREADY_ENABLED": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
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


def raise_for_error(error: Error):
    """Raise the API exception matching an application error code"""
    status_code = STATUS_BY_CODE.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
