"""
Tag Schemas

Request/response models for tag endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from cerebero.shared.schemas.common import BaseSchema


class TagNameRequest(BaseModel):
    name: str = Field(description="Tag name; stored trimmed and lowercased")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Tag name is required")
        return value


class ContentTagRequest(BaseModel):
    tag_id: str = Field(description="Id of an owned tag")

    @field_validator("tag_id")
    @classmethod
    def tag_id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("tag_id is required")
        return value


class ReplaceContentTagsRequest(BaseModel):
    tags: list[str] = Field(description="Complete set of tag names for the item")


class TagResponse(BaseSchema):
    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateTagResponse(BaseModel):
    message: str
    data: TagResponse
    created: bool


class ContentTagChangeResponse(BaseModel):
    message: str
    status: str = Field(description="attached | detached | missing")


class TopTagContent(BaseModel):
    id: str
    title: str
    url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TopTag(BaseModel):
    tag_id: str
    tag_name: str
    usage_count: int
    content: list[TopTagContent]


class SuggestTagsResponse(BaseModel):
    tags: list[str]
