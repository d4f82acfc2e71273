"""Service layer — business logic orchestration.

Every expected failure is raised as a :class:`ServiceError` carrying one
:class:`~userhub.core.errors.ErrorType`. The message is the type's template
rendered with the detail passed in, and the handlers return it verbatim.
"""

from __future__ import annotations

from userhub.core.errors import ErrorType


class ServiceError(Exception):
    """Base service exception."""

    error_type: ErrorType = ErrorType.SYS0001

    def __init__(self, detail: str = "", error_type: ErrorType | None = None) -> None:
        if error_type is not None:
            self.error_type = error_type
        self.detail = detail
        self.message = self.error_type.format(detail)
        super().__init__(self.message)


class NotFoundError(ServiceError):
    """Resource not found (-> USR0001)."""

    error_type = ErrorType.USR0001


class ConflictError(ServiceError):
    """Business rule conflict, e.g. duplicate username (-> USR0002)."""

    error_type = ErrorType.USR0002


class ValidationError(ServiceError):
    """Input validation error (-> SYS0002)."""

    error_type = ErrorType.SYS0002


class AuthenticationError(ServiceError):
    """Authentication failure (-> SYS0003)."""

    error_type = ErrorType.SYS0003
