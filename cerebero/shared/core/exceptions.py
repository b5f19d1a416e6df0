"""
Custom Exceptions

Application-specific exceptions with HTTP status codes and error codes.

Exception Hierarchy:
====================
    CereberoException (base)
       │
       ├── AuthenticationError (401)        ← No valid session
       ├── AuthorizationError (403)         ← Authenticated but not allowed
       ├── NotFoundError (404)              ← Resource absent (or not owned)
       │      ├── UserNotFoundError
       │      ├── ContentNotFoundError
       │      ├── TagNotFoundError
       │      └── TodoNotFoundError
       ├── ValidationError (400)            ← Invalid input data
       ├── ConflictError (409)              ← Uniqueness violation
       ├── StorageUnavailableError (500)    ← Backing store failed or timed out
       ├── UpstreamUnavailableError (500)   ← AI provider failed or timed out
       └── IdentityResolutionError (500)    ← User lookup for a session failed

Usage:
======
    from cerebero.shared.core.exceptions import NotFoundError, ValidationError

    # Raise with automatic status code
    raise ContentNotFoundError(content_id)
    # Results in: {"error": {"code": "NOT_FOUND", "message": "Content with id 'abc' not found"}}

    # Raise with additional details
    raise ValidationError("Title is required", details={"field": "title"})

Exception Handling:
===================
    Exceptions are caught by the error handler middleware and converted to JSON:
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Content with id 'abc-123' not found",
            "details": {}
        }
    }
"""

from typing import Any, Optional


class CereberoException(Exception):
    """
    Base exception for all Cerebero application errors.

    All custom exceptions inherit from this class, providing:
    - HTTP status code mapping
    - Error code for programmatic handling
    - Optional details dictionary
    - Consistent JSON serialization

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (default 500)
        error_code: Machine-readable error code
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dictionary with error details for JSON response
        """
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# ═══════════════════════════════════════════════════════════════════════════════
# AUTHENTICATION & AUTHORIZATION ERRORS (401, 403)
# ═══════════════════════════════════════════════════════════════════════════════


class AuthenticationError(CereberoException):
    """
    Authentication failed error (401 Unauthorized).

    Raised when:
    - No session token was sent
    - Token expired or malformed
    - Token resolves to no known user
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details,
        )


class AuthorizationError(CereberoException):
    """
    Authorization failed error (403 Forbidden).

    Raised when user is authenticated but lacks permission.
    """

    def __init__(
        self,
        message: str = "Access denied",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# NOT FOUND ERRORS (404)
# ═══════════════════════════════════════════════════════════════════════════════


class NotFoundError(CereberoException):
    """
    Resource not found error (404 Not Found).

    Also used when the resource exists but belongs to another user, so
    callers cannot discover other users' ids.

    Example:
        raise NotFoundError("Tag", tag_id)
        # Message: "Tag with id 'abc-123' not found"
    """

    def __init__(
        self,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )


class UserNotFoundError(NotFoundError):
    """User not found error."""

    def __init__(self, user_id: str) -> None:
        super().__init__(resource="User", resource_id=user_id)


class ContentNotFoundError(NotFoundError):
    """Content not found error."""

    def __init__(self, content_id: Optional[str] = None) -> None:
        super().__init__(resource="Content", resource_id=content_id)


class TagNotFoundError(NotFoundError):
    """Tag not found error."""

    def __init__(
        self,
        tag_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(resource="Tag", resource_id=tag_id, details=details)


class TodoNotFoundError(NotFoundError):
    """Todo not found error."""

    def __init__(self, todo_id: str) -> None:
        super().__init__(resource="Todo", resource_id=todo_id)


# ═══════════════════════════════════════════════════════════════════════════════
# VALIDATION & CONFLICT ERRORS (400, 409)
# ═══════════════════════════════════════════════════════════════════════════════


class ValidationError(CereberoException):
    """
    Validation error (400 Bad Request).

    Raised before any write when input data fails validation.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class ConflictError(CereberoException):
    """
    Resource conflict error (409 Conflict).

    Raised when an operation would violate a uniqueness rule.

    Example:
        raise ConflictError("A tag with this name already exists")
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# DEPENDENCY FAILURES (500)
# ═══════════════════════════════════════════════════════════════════════════════


class StorageUnavailableError(CereberoException):
    """
    Backing store failure (500).

    Raised when the database or document store errors or times out.
    The message is deliberately generic; the cause is logged server-side.
    """

    def __init__(
        self,
        message: str = "Storage temporarily unavailable",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=500,
            error_code="STORAGE_UNAVAILABLE",
            details=details,
        )


class UpstreamUnavailableError(CereberoException):
    """
    External service failure (500).

    Raised when the AI provider errors, rate-limits or times out.
    """

    def __init__(
        self,
        service_name: str,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        extra_details = details or {}
        extra_details["service"] = service_name
        super().__init__(
            message=message or f"{service_name} service unavailable",
            status_code=500,
            error_code="UPSTREAM_UNAVAILABLE",
            details=extra_details,
        )


class IdentityResolutionError(CereberoException):
    """
    Session user lookup failed (500).

    Distinct from "no such user": the lookup itself errored.
    """

    def __init__(
        self,
        message: str = "Could not resolve session user",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=500,
            error_code="IDENTITY_RESOLUTION_FAILED",
            details=details,
        )
