"""Typed denial surface of the access decision engine.

Every failure is terminal for the current request. The HTTP layer maps
``status_code`` and ``message`` onto the ``{"success": false, "message": ...}``
response body; ``reason`` is the machine-readable tag used in logs and tests.
"""

from enum import Enum
from typing import Optional


class DenialReason(str, Enum):
    """Machine-readable reasons attached to a denial."""

    UNAUTHENTICATED = "unauthenticated"
    READ_ONLY_ROLE = "read_only_role"
    EMPLOYEE_PORTAL_ONLY = "employee_portal_only"
    MODULE_NOT_PERMITTED = "module_not_permitted"
    SUPER_ADMIN_ONLY = "super_admin_only"
    MISSING_PERMISSION = "missing_permission"
    CROSS_TENANT = "cross_tenant"
    INTERNAL_ERROR = "internal_error"


class AccessError(Exception):
    """Base class for access check failures."""

    status_code: int = 500
    default_message: str = "Access check failed"

    def __init__(self, message: Optional[str] = None, reason: Optional[DenialReason] = None):
        self.message = message or self.default_message
        self.reason = reason
        super().__init__(self.message)


class Unauthenticated(AccessError):
    """No principal could be resolved for the request."""

    status_code = 401
    default_message = "User not authenticated"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, DenialReason.UNAUTHENTICATED)


class Forbidden(AccessError):
    """The principal is known but lacks the rights for the operation."""

    status_code = 403
    default_message = "Access denied"

    def __init__(
        self,
        reason: DenialReason,
        message: Optional[str] = None,
        module: Optional[str] = None,
        role: Optional[str] = None,
        permission: Optional[str] = None,
    ):
        super().__init__(message, reason)
        self.module = module
        self.role = role
        self.permission = permission

    def __repr__(self) -> str:
        return f"Forbidden(reason={self.reason.value!r}, module={self.module!r}, role={self.role!r})"


class InternalCheckError(AccessError):
    """An unexpected exception escaped while evaluating a check."""

    status_code = 500
    default_message = "Access check failed"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message, DenialReason.INTERNAL_ERROR)
        self.cause = cause
