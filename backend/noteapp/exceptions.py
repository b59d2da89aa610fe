"""
NoteApp Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions, each carrying its error kind.
How:   Every exception holds a message and an optional context dict, plus the
       HTTP status and error label it maps to. Global handlers registered in
       main.py turn them into `{timestamp, status, error, message, path}` bodies.
Who:   Raised by the note service; caught by the global handlers.

Exception Hierarchy:
    NoteAppError (base)
    ├── NotFoundError   → 404 Not Found
    └── InternalError   → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NoteAppError(Exception):
    """
    Base exception for all NoteApp application errors.

    Attributes:
        message:     User-facing error description (returned in the response body)
        context:     Additional debug info (logged but NOT returned to the client)
        status_code: HTTP status the global handler responds with
        error:       Short error label placed in the response body
    """

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(NoteAppError):
    """
    Raised when a requested record does not exist.

    The repository returns None for missing rows; the service converts that
    into this exception so routes never check for None themselves.
    """

    status_code = 404
    error = "Note Not Found"

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class InternalError(NoteAppError):
    """
    Raised when a persistence operation fails unexpectedly.

    The message is safe to return to the client. The underlying exception is
    chained (`raise ... from e`) and logged server-side only.
    """

    status_code = 500
    error = "Internal Server Error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
