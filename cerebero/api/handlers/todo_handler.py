"""
Todo Handler

Handles the daily todo list. Delete and toggle take the todo id in the
request body.
"""

from fastapi import APIRouter, status

from cerebero.api.dependencies import CurrentUserId, TodoServiceDep
from cerebero.shared.schemas.common import DataResponse, MessageResponse
from cerebero.shared.schemas.todo import (
    CreateTodoRequest,
    TodoIdRequest,
    TodoListResponse,
    TodoResponse,
)
from cerebero.shared.services.todo_service import MAX_ACTIVE_TODOS


router = APIRouter()


@router.get(
    "",
    response_model=TodoListResponse,
)
async def list_todos(
    user_id: CurrentUserId,
    todo_service: TodoServiceDep,
):
    """
    Incomplete todos first, then completed ones; oldest first within each.

    ``active_count`` and ``max_active`` let clients apply the advisory
    limit before offering to add another item.
    """
    todos = await todo_service.list_by_user(user_id)
    return TodoListResponse(
        message="Todos fetched successfully",
        data=[TodoResponse.model_validate(todo) for todo in todos],
        active_count=todo_service.active_count(todos),
        max_active=MAX_ACTIVE_TODOS,
    )


@router.post(
    "",
    response_model=DataResponse[TodoResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_todo(
    request: CreateTodoRequest,
    user_id: CurrentUserId,
    todo_service: TodoServiceDep,
):
    todo = await todo_service.add(user_id, request.title)
    return DataResponse(message="Todo created successfully", data=TodoResponse.model_validate(todo))


@router.delete(
    "",
    response_model=MessageResponse,
)
async def delete_todo(
    request: TodoIdRequest,
    user_id: CurrentUserId,
    todo_service: TodoServiceDep,
):
    await todo_service.delete(user_id, request.id)
    return MessageResponse(message="Todo deleted successfully")


@router.patch(
    "",
    response_model=DataResponse[TodoResponse],
)
async def toggle_todo(
    request: TodoIdRequest,
    user_id: CurrentUserId,
    todo_service: TodoServiceDep,
):
    todo = await todo_service.toggle(user_id, request.id)
    return DataResponse(message="Todo updated successfully", data=TodoResponse.model_validate(todo))
