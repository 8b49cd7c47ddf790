"""
ReviewShare Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception class carries a client-safe message and an optional
       context dict. Global exception handlers (registered in main.py) catch
       these and return structured JSON error responses with the matching
       HTTP status code.
Who:   Raised by services, auth dependencies and middleware.

Exception Hierarchy:
    ReviewShareError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── StoreError               → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ReviewShareError(Exception):
    """
    Base exception for all ReviewShare application errors.

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


class ValidationError(ReviewShareError):
    """
    Raised when client input fails a business rule.

    When:    Malformed pagination cursor, wrong confirmation code, empty query.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, wrong types) are rejected earlier by
    FastAPI with 422.
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


class AuthenticationError(ReviewShareError):
    """
    Raised when a request lacks a valid bearer token.

    HTTP:    401 Unauthorized, with `WWW-Authenticate: Bearer`
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(ReviewShareError):
    """
    Raised when an authenticated user acts on data owned by someone else.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ReviewShareError):
    """
    Raised when a requested entity does not exist.

    When:    Missing review/draft/profile by key, review id absent from a
             saved list.
    HTTP:    404 Not Found

    DynamoDB returns no `Item` for a missing key (not an exception); the
    services convert that into NotFoundError.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id is not None:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(ReviewShareError):
    """
    Raised when a conditional write loses against existing state.

    When:    Registering a taken UserId, exhausting ID allocation attempts,
             the saved list changing under an unsave.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource was modified concurrently. Please retry.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(ReviewShareError):
    """
    Raised when a DynamoDB call fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message is a fixed, operation-specific sentence ("Could not fetch
    reviews"). The botocore error code and message are logged server-side
    and kept in `context`; they are never returned to the client.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(ReviewShareError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
