"""
Service Dependencies

FastAPI dependencies for service injection.

Services are created per request around that request's storage unit of
work. They hold no state beyond the stores, settings and AI adapter they
were given, so nothing is shared between requests.

Usage:
======
    from cerebero.api.dependencies.services import ContentServiceDep

    @router.post("/content")
    async def create_content(data: CreateContentRequest, service: ContentServiceDep, ...):
        outcome = await service.create(user_id, data.title, data.type, ...)
"""

from typing import Annotated

from fastapi import Depends

from cerebero.api.dependencies.storage import Context, RequestStorage
from cerebero.shared.services.auth_service import AuthService
from cerebero.shared.services.content_service import ContentService
from cerebero.shared.services.search_service import SearchService
from cerebero.shared.services.tag_service import TagService
from cerebero.shared.services.todo_service import TodoService


async def get_auth_service(storage: RequestStorage, context: Context) -> AuthService:
    return AuthService(storage, context.settings)


async def get_content_service(storage: RequestStorage, context: Context) -> ContentService:
    return ContentService(storage, context.settings, ai=context.ai)


async def get_tag_service(storage: RequestStorage, context: Context) -> TagService:
    return TagService(storage, ai=context.ai)


async def get_todo_service(storage: RequestStorage) -> TodoService:
    return TodoService(storage.todos)


async def get_search_service(storage: RequestStorage, context: Context) -> SearchService:
    return SearchService(storage, context.settings, ai=context.ai)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
TagServiceDep = Annotated[TagService, Depends(get_tag_service)]
TodoServiceDep = Annotated[TodoService, Depends(get_todo_service)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
