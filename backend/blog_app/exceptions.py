"""
Blog Backend: Exception Hierarchy
==================================

What:  Application exceptions, each tagged with an `ErrorKind`.
How:   The persistence gateway and the routes raise these; a single handler
       registered in main.py looks the kind up in `ERROR_RESPONSES` and builds
       the JSON error envelope. Every kind has an entry there.
Who:   Raised by services and routes; caught by the global handler.

Exception Hierarchy:
    BlogAppError (base)
    ├── ValidationError          → 400 Bad Request      (VALIDATION)
    ├── NotFoundError            → 404 Not Found        (NOT_FOUND)
    ├── ReferenceNotFoundError   → 404 Not Found        (REFERENCE_NOT_FOUND)
    ├── ConflictError            → 409 Conflict         (CONFLICT)
    └── DatabaseError            → 500 Internal Error   (SYSTEM_FAILURE)
"""

import enum
from typing import Any, Dict, NamedTuple, Optional


class ErrorKind(enum.Enum):
    """The closed set of failure categories the API can report."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    REFERENCE_NOT_FOUND = "reference_not_found"
    CONFLICT = "conflict"
    SYSTEM_FAILURE = "system_failure"


class ErrorResponseSpec(NamedTuple):
    status_code: int
    error_code: str


ERROR_RESPONSES: Dict[ErrorKind, ErrorResponseSpec] = {
    ErrorKind.VALIDATION: ErrorResponseSpec(400, "validation_error"),
    ErrorKind.NOT_FOUND: ErrorResponseSpec(404, "not_found"),
    ErrorKind.REFERENCE_NOT_FOUND: ErrorResponseSpec(404, "not_found"),
    ErrorKind.CONFLICT: ErrorResponseSpec(409, "conflict"),
    ErrorKind.SYSTEM_FAILURE: ErrorResponseSpec(500, "server_error"),
}


class BlogAppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        kind:     ErrorKind used to pick the HTTP status
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, NOT returned for SYSTEM_FAILURE)
    """

    kind: ErrorKind = ErrorKind.SYSTEM_FAILURE

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogAppError):
    """
    Raised when client input is structurally invalid.

    When: missing title/content, missing authorId, non-numeric post id.
    Recovered locally; never logged as a system fault.
    """

    kind = ErrorKind.VALIDATION

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


class NotFoundError(BlogAppError):
    """Raised when the requested entity does not exist (GET /posts/{id})."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ReferenceNotFoundError(NotFoundError):
    """
    Raised when a write references an entity that does not exist.

    When: POST /posts with an authorId that matches no Author.
    """

    kind = ErrorKind.REFERENCE_NOT_FOUND


class ConflictError(BlogAppError):
    """Raised when a write would violate a uniqueness rule (duplicate author email)."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BlogAppError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic. The original error
    is carried in `context` and logged server-side only.
    """

    kind = ErrorKind.SYSTEM_FAILURE

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
