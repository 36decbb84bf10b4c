"""
Cookbook Services — Exception Hierarchy
=========================================

What:  Application-specific exceptions shared by every layer of the
       request pipeline (repository → service → handler → router).
How:   Each exception carries a client-safe message and an optional context
       dict for server-side logging, plus the HTTP status it maps to.

Exception Hierarchy:
    CookbookError (base)
    ├── NotFoundError          → 404 Not Found
    ├── BadRequestError        → 400 Bad Request
    ├── InternalServerError    → 500 Internal Server Error
    ├── AuthenticationError    → 401 Unauthorized
    └── AuthorizationError     → 403 Forbidden

Layer policy:
    - Repositories raise NotFoundError; driver errors (SQLAlchemyError)
      propagate untouched.
    - Services translate everything that is not NotFoundError into
      InternalServerError.
    - Handlers pick the status code for resource outcomes; the auth
      dependency raises AuthenticationError / AuthorizationError, which the
      global exception handler renders.
"""

from typing import Any, Dict, Optional


class CookbookError(Exception):
    """
    Base exception for all cookbook service errors.

    Attributes:
        message:  Client-safe error description
        context:  Extra debug info (logged, never returned to the client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(CookbookError):
    """
    Raised when no live row matches the requested identity.

    Soft-deleted rows count as missing. An empty collection read is also
    reported as NotFoundError so the handler can answer "no <plural> found".
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class BadRequestError(CookbookError):
    """Malformed path identifier or request body. Raised by handlers only."""

    status_code = 400

    def __init__(
        self,
        message: str = "bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InternalServerError(CookbookError):
    """
    Any failure the client cannot fix: driver errors, missing principal.

    Services raise it with the generic "internal server error" message on
    reads and with the underlying driver message on writes.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(CookbookError):
    """Missing, malformed, expired or unverifiable bearer token."""

    status_code = 401

    def __init__(
        self,
        message: str = "unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(CookbookError):
    """Authenticated principal lacks the role the route requires."""

    status_code = 403

    def __init__(
        self,
        message: str = "forbidden",
        role: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if role:
            ctx["required_role"] = role
        super().__init__(message=message, context=ctx)
        self.role = role
