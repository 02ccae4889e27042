"""
ShipTrack Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions, one per error kind the API exposes.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) map each class to an
       HTTP status code and a small JSON body.
Who:   Raised by services, the store and the auth dependencies.

Exception Hierarchy:
    ShipTrackError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (duplicate unique key)
    ├── UnauthenticatedError     → 401 Unauthorized (no credential)
    ├── InvalidCredentialsError  → 401 Unauthorized (login failed)
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── ConfigurationError       → 500 Internal Server Error

The `context` dict is logged server-side and never returned to the client.
"""

from typing import Any, Dict, Optional


class ShipTrackError(Exception):
    """
    Base exception for all ShipTrack application errors.

    Attributes:
        message:  Text placed in the response body; must not leak internals
        context:  Key/value details for the server log only
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ShipTrackError):
    """
    Bad or missing client input.

    When:    Missing required fields, short password, unknown shipment status.
    HTTP:    400 Bad Request
    """

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


class ConflictError(ShipTrackError):
    """
    Raised when a unique key already exists.

    When:    Registering an email that is taken, or a tracking number collision
             caught by the database's unique constraint.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthenticatedError(ShipTrackError):
    """Raised when a protected endpoint is called without a bearer token (401)."""

    def __init__(
        self,
        message: str = "Access token required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(ShipTrackError):
    """
    Raised when login fails.

    Unknown email and wrong password both raise this with the same message,
    so a caller cannot tell which one was wrong.
    HTTP:    401 Unauthorized
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid credentials", context=context)


class ForbiddenError(ShipTrackError):
    """
    Raised when the caller is authenticated but not allowed.

    When:    Invalid/expired token, non-admin on an admin route, or a
             non-owner tracking someone else's shipment.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ShipTrackError):
    """
    A user or shipment looked up by id or tracking number is absent.

    The store returns None for missing rows; services convert that None into
    this exception so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(ShipTrackError):
    """
    Unexpected failure reported by SQLAlchemy or the driver.

    Note:
        The message returned to the client is always generic. The SQL error
        and constraint names are logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(ShipTrackError):
    """Raised when a required setting (the token signing secret) is missing (500)."""

    def __init__(
        self,
        message: str = "Server is not configured correctly",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
