"""
SmartHome API: Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions, one per way a pipeline step can halt.
Why:   Each exception carries the HTTP status its halt maps to, so the
       pipeline runner can render the terminal response without a lookup
       table of its own.
How:   Every exception stores a message (logged), a context dict (logged) and
       a status_code (rendered). The response body only ever carries the
       standard reason phrase for the status.
Who:   Raised by pipeline steps; caught by Pipeline.run() and, as a last
       resort, by the global handlers registered in main.py.

Exception Hierarchy:
    SmartHomeError (base)            -> 500
    ├── ValidationError              -> 400 Bad Request
    ├── ConflictError                -> 409 Conflict
    ├── NotFoundError                -> 404 Not Found
    └── DatabaseError                -> 500 (overridable, list uses 400)
"""

from typing import Any, Dict, Optional

from fastapi import status


class SmartHomeError(Exception):
    """
    Base exception for all SmartHome application errors.

    Attributes:
        message:      Description for the server log
        context:      Additional debug info (logged, never returned to client)
        status_code:  HTTP status the halt is rendered with
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.context = context or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(SmartHomeError):
    """
    Raised when a request payload fails its JSON schema.

    The jsonschema error list is kept in context["errors"] for the log.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if errors:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.errors = errors


class ConflictError(SmartHomeError):
    """Raised when a natural key is already taken."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        resource: str = "resource",
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if key is not None:
            ctx["key"] = key
        super().__init__(message=f"{resource} {key} already exists", context=ctx)


class NotFoundError(SmartHomeError):
    """
    Raised when a lookup or delete target does not exist.

    Also used when the store fails during single-read or delete: the client
    cannot tell the two apart, which is the long-standing behaviour of the
    read and delete routes.
    """

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if key is not None:
            message = f"{resource} {key} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if key is not None:
            ctx["key"] = key
        super().__init__(message=message, context=ctx)


class DatabaseError(SmartHomeError):
    """
    Raised when a store operation throws.

    Defaults to 500. The list route passes status_code=400, matching what
    API consumers have always received from that endpoint.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message=message, context=context, status_code=status_code)
