"""
Storage Records

The backend-agnostic shapes that cross the storage port. Both storage
backends return these, so services never see ORM objects or Convex
documents.

Contract:
=========
- snake_case field names
- ids are opaque strings (UUID text for SQL, document ids for Convex)
- timestamps are timezone-aware ``datetime`` values in UTC

Usage:
======
    from cerebero.shared.schemas.records import ContentRecord

    record = ContentRecord.model_validate(orm_row)       # SQL backend
    record = ContentRecord.model_validate(mapped_dict)   # Convex backend
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict

from cerebero.shared.models.enums import AuthProvider, ContentType


def _as_str(value: Any) -> Any:
    return str(value) if value is not None else value


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


RecordId = Annotated[str, BeforeValidator(_as_str)]
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Record(BaseModel):
    """Base for storage records; readable from ORM rows and dicts alike."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class UserRecord(Record):
    id: RecordId
    email: str
    name: str
    image: Optional[str] = None
    provider: AuthProvider = AuthProvider.CREDENTIALS
    provider_id: Optional[str] = None
    password_hash: Optional[str] = None
    created_at: UtcDatetime


class NewContent(BaseModel):
    """Fields needed to insert one content item."""

    title: str
    type: ContentType
    url: Optional[str] = None
    body: Optional[str] = None


class ContentRecord(Record):
    id: RecordId
    user_id: RecordId
    title: str
    type: ContentType
    url: Optional[str] = None
    body: Optional[str] = None
    is_shared: bool = False
    is_favourite: bool = False
    share_id: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class TagRecord(Record):
    id: RecordId
    user_id: RecordId
    name: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ContentTagRecord(Record):
    user_id: RecordId
    content_id: RecordId
    tag_id: RecordId
    created_at: UtcDatetime


class TodoRecord(Record):
    id: RecordId
    user_id: RecordId
    title: str
    completed: bool = False
    created_at: UtcDatetime
    updated_at: UtcDatetime


class EmbeddingCandidate(Record):
    """A stored embedding together with the content it describes."""

    content: ContentRecord
    embedding: list[float]


class ContentPage(BaseModel):
    """One page of content plus the unpaginated total."""

    items: list[ContentRecord]
    total: int
