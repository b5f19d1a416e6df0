"""
Todo Schemas

Request/response models for todo endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from cerebero.shared.schemas.common import BaseSchema, DataResponse


TODO_TITLE_MAX_LENGTH = 280


class CreateTodoRequest(BaseModel):
    title: str = Field(description="Todo text, 1-280 characters after trimming")

    @field_validator("title")
    @classmethod
    def title_length(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        if len(value) > TODO_TITLE_MAX_LENGTH:
            raise ValueError(f"Title must be at most {TODO_TITLE_MAX_LENGTH} characters")
        return value


class TodoIdRequest(BaseModel):
    id: str = Field(description="Todo id")

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Todo id is required")
        return value


class TodoResponse(BaseSchema):
    id: str
    title: str
    completed: bool
    created_at: datetime
    updated_at: datetime


class TodoListResponse(DataResponse[list[TodoResponse]]):
    """The list plus the advisory active-item limit clients enforce when adding."""

    active_count: int = Field(description="Todos not yet completed")
    max_active: int = Field(description="Advisory limit on active todos")
