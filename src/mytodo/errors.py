from __future__ import annotations

from enum import Enum
from typing import Dict, Type


class ErrorKind(str, Enum):
    """Wire names for application error categories."""

    NOT_FOUND = "NotFound"
    DUPLICATE_EMAIL = "DuplicateEmail"
    INVALID_CREDENTIALS = "InvalidCredentials"
    VALIDATION = "ValidationError"
    CONNECTIVITY = "ConnectivityError"
    HASHING = "HashingError"
    INTERNAL = "InternalError"


# PUBLIC_INTERFACE
class AppError(Exception):
    """
    Base class for every error the domain, services and gateway raise on purpose.

    Each subclass carries the category it reports on the wire (`kind`) and the
    HTTP status the gateway answers with (`status_code`).
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    default_message: str = "internal error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(AppError):
    """The entity does not exist or belongs to another owner."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "not found"


class DuplicateEmailError(AppError):
    kind = ErrorKind.DUPLICATE_EMAIL
    status_code = 409
    default_message = "user already exists"


class InvalidCredentialsError(AppError):
    """Authentication failed; deliberately silent about which part was wrong."""

    kind = ErrorKind.INVALID_CREDENTIALS
    status_code = 401
    default_message = "invalid credentials"


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "invalid request"


class ConnectivityError(AppError):
    """Storage or a downstream service could not be reached."""

    kind = ErrorKind.CONNECTIVITY
    status_code = 503
    default_message = "service unavailable"


class HashingError(AppError):
    kind = ErrorKind.HASHING
    status_code = 500
    default_message = "failed to hash password"


_BY_KIND: Dict[ErrorKind, Type[AppError]] = {
    cls.kind: cls
    for cls in (
        NotFoundError,
        DuplicateEmailError,
        InvalidCredentialsError,
        ValidationError,
        ConnectivityError,
        HashingError,
    )
}


# PUBLIC_INTERFACE
def error_from_kind(kind: str, message: str) -> AppError:
    """Rebuild the exception matching a wire error kind; unknown kinds become AppError."""
    try:
        cls = _BY_KIND[ErrorKind(kind)]
    except (KeyError, ValueError):
        return AppError(message)
    return cls(message)
