"""
Storage Dependency

FastAPI dependencies for the application context and per-request storage.

``get_storage`` opens one unit of work on the configured backend for the
duration of the handler. With the SQL backend that is one transaction:
committed on success, rolled back if the handler raises. The dependency is
function-scoped, so the commit runs before the response is sent and a failed
commit reaches the exception handlers as a 500.

Usage:
======
    from cerebero.api.dependencies.storage import RequestStorage

    @router.get("/todos")
    async def list_todos(storage: RequestStorage, user_id: CurrentUserId):
        return await storage.todos.list_by_user(user_id)
"""

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from cerebero.api.context import AppContext
from cerebero.config.settings import Settings
from cerebero.shared.repositories.ports import Storage


def get_context(request: Request) -> AppContext:
    """The context built at startup (or injected by tests)."""
    return request.app.state.context


async def get_storage(
    context: Annotated[AppContext, Depends(get_context)],
) -> AsyncIterator[Storage]:
    """
    FastAPI dependency for a storage unit of work.

    Yields:
        Storage: Stores bound to the current request
    """
    async with context.backend.session() as storage:
        yield storage


def get_app_settings(
    context: Annotated[AppContext, Depends(get_context)],
) -> Settings:
    return context.settings


# Type aliases for cleaner route signatures
Context = Annotated[AppContext, Depends(get_context)]
RequestStorage = Annotated[Storage, Depends(get_storage, scope="function")]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
