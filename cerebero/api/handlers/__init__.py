"""
API Handlers

Route handlers for the Cerebero API.

Handlers follow the pattern:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

All business logic is delegated to the service layer; errors are raised as
application exceptions and rendered by the global exception handlers.
"""

from cerebero.api.handlers import (
    auth_handler,
    content_handler,
    health_handler,
    share_handler,
    tag_handler,
    todo_handler,
    user_handler,
)

__all__ = [
    "auth_handler",
    "content_handler",
    "health_handler",
    "share_handler",
    "tag_handler",
    "todo_handler",
    "user_handler",
]
