"""
Search Schemas

Search results mix content and tag hits in one list. Content entries come
first; each entry carries ``type`` so clients can render them apart.
The camelCase wire names match the search client contract.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from cerebero.shared.models.enums import ContentType, SearchResultType
from cerebero.shared.schemas.common import BaseSchema


class SearchResult(BaseSchema):
    id: str
    type: SearchResultType
    title: str
    url: str
    description: Optional[str] = None
    content_type: Optional[ContentType] = Field(default=None, alias="contentType")
    is_favourite: Optional[bool] = Field(default=None, alias="isFavourite")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class SearchResponse(BaseModel):
    results: list[SearchResult]
