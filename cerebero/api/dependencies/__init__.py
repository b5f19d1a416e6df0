"""
API Dependencies

FastAPI dependencies for injection into route handlers.

Dependencies:
=============
- Context/storage: get_context(), get_storage(), RequestStorage
- Authentication: get_current_user_id(), CurrentUserId
- Services: get_*_service() functions and *ServiceDep aliases

Type Aliases:
=============
Type aliases provide cleaner route signatures:

    # Instead of this:
    async def handler(
        user_id: str = Depends(get_current_user_id),
        service: ContentService = Depends(get_content_service),
    ):

    # Write this:
    async def handler(user_id: CurrentUserId, service: ContentServiceDep):

Within one request FastAPI caches dependencies, so the auth dependency and
the services share the same storage unit of work.
"""

from cerebero.api.dependencies.storage import (
    get_context,
    get_storage,
    Context,
    RequestStorage,
    AppSettings,
)
from cerebero.api.dependencies.auth import (
    get_session_claims,
    get_current_user_id,
    CurrentUserId,
)
from cerebero.api.dependencies.services import (
    AuthServiceDep,
    ContentServiceDep,
    TagServiceDep,
    TodoServiceDep,
    SearchServiceDep,
)

__all__ = [
    # Context / storage
    "get_context",
    "get_storage",
    "Context",
    "RequestStorage",
    "AppSettings",
    # Authentication
    "get_session_claims",
    "get_current_user_id",
    "CurrentUserId",
    # Services
    "AuthServiceDep",
    "ContentServiceDep",
    "TagServiceDep",
    "TodoServiceDep",
    "SearchServiceDep",
]
