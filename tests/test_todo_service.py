"""Tests for TodoService."""

import pytest

from cerebero.shared.core.exceptions import TodoNotFoundError, ValidationError
from cerebero.shared.services.todo_service import MAX_TITLE_LENGTH, TodoService


@pytest.fixture
def todos(storage):
    return TodoService(storage.todos)


class TestTodoService:
    async def test_add_and_list(self, todos, alice):
        first = await todos.add(alice, "  Read chapter 3 ")
        second = await todos.add(alice, "Write notes")

        assert first.title == "Read chapter 3"
        assert first.completed is False
        assert first.user_id == alice
        assert [todo.id for todo in await todos.list_by_user(alice)] == [first.id, second.id]

    async def test_completed_items_sort_last(self, todos, alice):
        first = await todos.add(alice, "one")
        second = await todos.add(alice, "two")
        third = await todos.add(alice, "three")

        toggled = await todos.toggle(alice, first.id)
        assert toggled.completed is True

        listed = await todos.list_by_user(alice)
        assert [todo.id for todo in listed] == [second.id, third.id, first.id]
        assert TodoService.active_count(listed) == 2

        assert (await todos.toggle(alice, first.id)).completed is False

    async def test_fourth_active_item_is_allowed(self, todos, alice):
        for n in range(4):
            await todos.add(alice, f"todo {n}")
        assert TodoService.active_count(await todos.list_by_user(alice)) == 4

    @pytest.mark.parametrize("title", ["", "   ", "x" * (MAX_TITLE_LENGTH + 1)])
    async def test_invalid_title(self, todos, alice, title):
        with pytest.raises(ValidationError):
            await todos.add(alice, title)

    async def test_delete(self, todos, alice):
        todo = await todos.add(alice, "gone soon")
        await todos.delete(alice, todo.id)
        assert await todos.list_by_user(alice) == []
        with pytest.raises(TodoNotFoundError):
            await todos.delete(alice, todo.id)

    async def test_other_users_todo_is_not_found(self, todos, alice, bob):
        todo = await todos.add(alice, "private")
        with pytest.raises(TodoNotFoundError):
            await todos.toggle(bob, todo.id)
        with pytest.raises(TodoNotFoundError):
            await todos.delete(bob, todo.id)
        assert await todos.list_by_user(bob) == []
