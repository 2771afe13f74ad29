from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Malformed or missing input; surfaced as 400 ``{message, field}``."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class AuthorizationError(Exception):
    """Missing or invalid admin session."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(Exception):
    status_code = status.HTTP_404_NOT_FOUND


def error_response(
    message: str,
    field: Optional[str] = None,
    code: int = status.HTTP_400_BAD_REQUEST,
    headers: Optional[Dict[str, str]] = None,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details."""
    logger.error("%s field=%s code=%s", message, field, code)
    detail = {"message": message}
    if field:
        detail["field"] = field
    return HTTPException(status_code=code, detail=detail, headers=headers)
