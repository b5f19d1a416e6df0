"""
Todo Service

Owner-scoped CRUD for the small daily todo list.

The list is meant to hold a handful of active items (``MAX_ACTIVE_TODOS``).
That limit is advisory. The list endpoint reports it next to the current
active count so clients can enforce it when adding; the backend does not
reject a fourth item.
"""

from cerebero.shared.core.exceptions import TodoNotFoundError, ValidationError
from cerebero.shared.core.logging import get_logger
from cerebero.shared.repositories.ports import TodoStore
from cerebero.shared.schemas.records import TodoRecord


logger = get_logger(__name__)

MAX_ACTIVE_TODOS = 3
MAX_TITLE_LENGTH = 280


class TodoService:
    def __init__(self, todos: TodoStore) -> None:
        self.todos = todos

    async def list_by_user(self, user_id: str) -> list[TodoRecord]:
        """Incomplete items first, each group oldest first."""
        todos = await self.todos.list_by_user(user_id)
        # sorted() is stable, so creation order survives within each group
        return sorted(todos, key=lambda todo: todo.completed)

    async def add(self, user_id: str, title: str) -> TodoRecord:
        title = (title or "").strip()
        if not title or len(title) > MAX_TITLE_LENGTH:
            raise ValidationError(
                f"Title must be 1 to {MAX_TITLE_LENGTH} characters",
                details={"field": "title"},
            )
        todo = await self.todos.create(user_id, title)
        logger.info("todo_created", user_id=user_id, todo_id=todo.id)
        return todo

    async def delete(self, user_id: str, todo_id: str) -> None:
        if not await self.todos.delete(user_id, todo_id):
            raise TodoNotFoundError(todo_id)
        logger.info("todo_deleted", user_id=user_id, todo_id=todo_id)

    async def toggle(self, user_id: str, todo_id: str) -> TodoRecord:
        todo = await self.todos.toggle(user_id, todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    @staticmethod
    def active_count(todos: list[TodoRecord]) -> int:
        return sum(1 for todo in todos if not todo.completed)
