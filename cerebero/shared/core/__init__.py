"""
Core Module

Provides core functionality shared across the application:
- Structured logging
- Custom exceptions

Usage:
======
    from cerebero.shared.core.logging import logger, get_logger
    from cerebero.shared.core.exceptions import CereberoException, NotFoundError

    logger.info("content_created", user_id=user_id)
"""

from cerebero.shared.core.logging import (
    logger,
    get_logger,
    log_context,
    clear_log_context,
)
from cerebero.shared.core.exceptions import (
    CereberoException,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    UserNotFoundError,
    ContentNotFoundError,
    TagNotFoundError,
    TodoNotFoundError,
    ValidationError,
    ConflictError,
    StorageUnavailableError,
    UpstreamUnavailableError,
    IdentityResolutionError,
)

__all__ = [
    # Logging
    "logger",
    "get_logger",
    "log_context",
    "clear_log_context",
    # Exceptions
    "CereberoException",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "UserNotFoundError",
    "ContentNotFoundError",
    "TagNotFoundError",
    "TodoNotFoundError",
    "ValidationError",
    "ConflictError",
    "StorageUnavailableError",
    "UpstreamUnavailableError",
    "IdentityResolutionError",
]
