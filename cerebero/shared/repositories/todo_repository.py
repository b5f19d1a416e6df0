"""
Todo Repository

SQL implementation of ``TodoStore``.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from cerebero.shared.models.base import utcnow
from cerebero.shared.models.todo import Todo
from cerebero.shared.repositories.base import BaseRepository, require_id, storage_operation
from cerebero.shared.schemas.records import TodoRecord


class TodoRepository(BaseRepository[Todo, TodoRecord]):
    """Repository for Todo database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Todo, TodoRecord, session)

    @storage_operation
    async def list_by_user(self, user_id: str) -> list[TodoRecord]:
        rows = await self.list_owned(user_id, Todo.created_at.asc())
        return [self.to_record(row) for row in rows]

    @storage_operation
    async def create(self, user_id: str, title: str) -> TodoRecord:
        todo = await self.insert(
            user_id=require_id(user_id, "user_id"),
            title=title,
            completed=False,
        )
        return self.to_record(todo)

    @storage_operation
    async def delete(self, user_id: str, todo_id: str) -> bool:
        todo = await self.get_owned(user_id, todo_id)
        if todo is None:
            return False
        await self.remove(todo)
        return True

    @storage_operation
    async def toggle(self, user_id: str, todo_id: str) -> Optional[TodoRecord]:
        todo = await self.get_owned(user_id, todo_id)
        if todo is None:
            return None
        todo.completed = not todo.completed
        todo.updated_at = utcnow()
        return self.to_record(await self.save(todo))
