"""
Content Schemas

Request/response models for content endpoints.

Validation:
===========
- title: trimmed, must be non-empty
- type: document | tweet | youtube | link
- url/body: optional; which one carries the payload depends on type, by
  convention only
- tags: optional list of tag names, normalised by the tag service
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from cerebero.shared.models.enums import ContentType
from cerebero.shared.schemas.common import BaseSchema, OffsetPagination


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ContentWriteRequest(BaseModel):
    """Fields shared by create and edit."""

    title: str = Field(description="Item title", examples=["Rust Book"])
    type: ContentType = Field(description="document | tweet | youtube | link")
    url: Optional[str] = Field(default=None, description="Link target")
    body: Optional[str] = Field(default=None, description="Document text")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("url")
    @classmethod
    def strip_url(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value)


class CreateContentRequest(ContentWriteRequest):
    tags: list[str] = Field(default_factory=list, description="Tag names to attach")


class UpdateContentRequest(ContentWriteRequest):
    pass


class ImportItem(BaseModel):
    """
    One row of a batch import.

    Fields are loose here; the content service validates the whole batch
    before writing so it can report which row failed.
    """

    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    body: Optional[str] = None


class ImportContentRequest(BaseModel):
    content: list[ImportItem] = Field(description="Items to import")


class ContentResponse(BaseSchema):
    id: str
    user_id: str
    title: str
    type: ContentType
    url: Optional[str] = None
    body: Optional[str] = None
    is_shared: bool
    is_favourite: bool
    share_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SharedContentResponse(BaseSchema):
    """Public view of a shared item; owner and share fields are left out."""

    id: str
    title: str
    type: ContentType
    url: Optional[str] = None
    body: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CreateContentResponse(BaseModel):
    message: str
    content_id: str
    share_id: Optional[str] = None
    tags: list[str] = Field(default_factory=list, description="Tags attached")
    warnings: list[str] = Field(
        default_factory=list,
        description="Best-effort steps that failed (embedding, tag attach)",
    )


class ImportContentResponse(BaseModel):
    success: bool = True
    message: str
    count: int


class ShareStatusResponse(BaseModel):
    is_shared: bool
    share_id: Optional[str] = None
    share_url: Optional[str] = None


class ToggleShareResponse(BaseModel):
    message: str
    data: ContentResponse
    share_url: Optional[str] = None


class ContentByTagResponse(BaseModel):
    tag: str
    content: list[ContentResponse]
    pagination: OffsetPagination

