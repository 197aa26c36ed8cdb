"""
iBuddy Backend — Exception Hierarchy
======================================

What:  Application-specific exceptions, each mapped to one HTTP status by the
       global handlers registered in main.py.
Who:   Raised by route handlers, auth helpers and (for invariant faults) the
       stores; caught by the handlers in main.py.

Exception Hierarchy:
    IBuddyError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden (carries the rule's reason)
    ├── NotFoundError            → 404 Not Found
    └── InvariantViolationError  → 500 Internal Server Error

Not-found lookups in the stores return None; it is the caller that decides
whether absence is fatal and raises NotFoundError. Authorization rules never
raise either: they return a decision, and the handler turns a denial into
PermissionDeniedError so the reason reaches the user.
"""

from typing import Any, Dict, Optional


class IBuddyError(Exception):
    """
    Base exception for all iBuddy application errors.

    Attributes:
        message:  User-facing description (safe to return in an API response)
        context:  Extra debug info (logged, returned only where the handler allows)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(IBuddyError):
    """Client input broke a business rule (e.g. email already taken)."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(IBuddyError):
    """
    Missing, invalid or expired credentials.

    Login failures always use the default message: an unknown email and a
    wrong password must look the same to the client.
    """

    def __init__(
        self,
        message: str = "Invalid email or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(IBuddyError):
    """The authenticated user is not allowed to perform the action."""

    def __init__(
        self,
        reason: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=reason, context=context)
        self.reason = reason


class NotFoundError(IBuddyError):
    """A requested user, mentee, note or asset does not exist."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InvariantViolationError(IBuddyError):
    """
    Internal consistency fault, e.g. a record that cannot be read back right
    after it was written. Unrecoverable for the current operation.
    """

    def __init__(
        self,
        message: str = "Internal consistency check failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
