"""
Catalog Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the catalog's error taxonomy.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    CatalogError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict (unique constraint violated)
    ├── PermissionDeniedError    → 403 Forbidden (admin boundary)
    ├── FileStorageError         → 500 Internal Server Error
    └── InternalError            → 500 Internal Server Error (masked)
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only selectively returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CatalogError):
    """
    Raised when client input fails a business-rule check.

    When:    Upload with a disallowed content type, file path escaping storage.
    HTTP:    400 Bad Request

    Request body schema errors never get here; FastAPI answers those with 422.

    Example response:
        {
            "error": "validation_error",
            "message": "Validation failed (expected type is image/jpeg)",
            "details": {"field": "file", "content_type": "image/png"}
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


class NotFoundError(CatalogError):
    """
    Raised when a requested resource does not exist.

    When:    GET /products/{term} matching nothing, PATCH/DELETE of an unknown id.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts
    that None into this exception.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with '{resource_id}' not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(CatalogError):
    """
    Raised when a write violates a unique constraint (duplicate slug/title).

    HTTP:    409 Conflict

    The message is the database's own detail text, e.g.
    "Key (slug)=(chair) already exists."
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(CatalogError):
    """
    Raised when an administrative route is called without a valid token.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Administrative access required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(CatalogError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error

    The OS error and path go into context (logged); the client only sees
    the generic message.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(CatalogError):
    """
    Raised when a database operation fails for any reason other than a
    recognised constraint violation.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The underlying
    exception is logged with its stack trace by whoever raises this.
    """

    def __init__(
        self,
        message: str = "Unexpected error, check server logs",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
