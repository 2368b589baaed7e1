"""
notestack: Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for each error class the services produce.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered by the app factories) turn these
       into HTTP responses with the right status code.
Who:   Raised by storage and services; caught by global handlers.

Exception Hierarchy:
    NotestackError (base)
    ├── ValidationError      → 400 Bad Request
    ├── NotFoundError        → 404 Not Found
    ├── StorageError         → 500 Internal Server Error
    │   ├── DatabaseError
    │   └── FileStorageError
    └── StartupError         → process refuses to start

The message of a StorageError is always generic. Driver errors, SQL text and
file paths go into `context`, which is logged but never returned to clients.
"""

from typing import Any, Dict, Optional


class NotestackError(Exception):
    """
    Base exception for all notestack errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotestackError):
    """
    Raised when client input fails validation.

    When:    Malformed JSON, blank title/body, non-positive or non-numeric id,
             empty journal body.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NotestackError):
    """
    Raised when a requested resource does not exist.

    When:    DELETE /notes/{id} affected zero rows.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(NotestackError):
    """
    Raised when the storage backend fails.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(StorageError):
    """
    Raised when a database operation fails or exceeds the query timeout.

    When:    Connection lost mid-query, pool exhausted, statement error,
             operation slower than QUERY_TIMEOUT.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(StorageError):
    """
    Raised when the journal file cannot be read or written.

    When:    Disk full, permission denied, volume not mounted, I/O error.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StartupError(NotestackError):
    """
    Raised during bootstrap when the service cannot become ready.

    When:    DATABASE_URL missing, database unreachable before the startup
             deadline, schema creation failed.
    Effect:  Raised from the ASGI lifespan, so uvicorn aborts startup and
             the process exits without serving traffic.
    """

    def __init__(
        self,
        message: str = "Service failed to start",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
