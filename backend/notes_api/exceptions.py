"""
Notes API — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the failure modes of the note store.
Why:   Each exception maps to exactly one HTTP status code, so services can
       raise without knowing about HTTP and routes stay free of try/except.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON.
Who:   Raised by NoteService; caught by the handlers in main.py.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError  → 400 Bad Request (client can fix)
    ├── NotFoundError    → 404 Not Found
    └── StoreError       → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when client input fails validation.

    When:    Empty content, unknown category, null for a required field.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Content is required",
            "details": {"field": "content"}
        }
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


class NotFoundError(NotesAPIError):
    """
    Raised when a requested note does not exist.

    When:    Any operation addressing /notes/{id} with an unknown or malformed id.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service converts that
    None into this exception.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(NotesAPIError):
    """
    Raised when the underlying store fails (connection lost, constraint
    violation, driver error).

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver details
    stay in `context` and in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
