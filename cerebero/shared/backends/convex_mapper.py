"""
Convex Document Mapper

Translates Convex function results (camelCase keys, epoch-millisecond
timestamps, document ids) into the relational contract every caller uses
(snake_case keys, ISO-8601 timestamps, string ids), then into records.

    {"id": "k17...", "userId": "k57...", "isFavourite": true, "createdAt": 1735689600000}
        │  to_api_content()
        ▼
    {"id": "k17...", "user_id": "k57...", "is_favourite": true,
     "created_at": "2025-01-01T00:00:00.000Z"}
        │  ContentRecord.model_validate()
        ▼
    ContentRecord(...)
"""

from datetime import datetime, timezone
from typing import Any, Optional

from cerebero.shared.schemas.records import (
    ContentRecord,
    ContentTagRecord,
    TagRecord,
    TodoRecord,
    UserRecord,
)


def iso_from_epoch_ms(value: Optional[float]) -> Optional[str]:
    """Epoch milliseconds → ISO-8601 UTC string with millisecond precision."""
    if value is None:
        return None
    moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_api_content(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": doc["id"],
        "user_id": doc["userId"],
        "title": doc["title"],
        "type": doc["type"],
        "url": doc.get("url"),
        "body": doc.get("body"),
        "is_shared": doc.get("isShared", False),
        "is_favourite": doc.get("isFavourite", False),
        "share_id": doc.get("shareId"),
        "created_at": iso_from_epoch_ms(doc["createdAt"]),
        "updated_at": iso_from_epoch_ms(doc["updatedAt"]),
    }


def to_api_tag(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": doc["id"],
        "user_id": doc["userId"],
        "name": doc["name"],
        "created_at": iso_from_epoch_ms(doc["createdAt"]),
        "updated_at": iso_from_epoch_ms(doc["updatedAt"]),
    }


def to_api_user(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": doc["id"],
        "email": doc["email"],
        "name": doc["name"],
        "image": doc.get("image"),
        "provider": doc.get("provider", "credentials"),
        "provider_id": doc.get("providerId"),
        "password_hash": doc.get("passwordHash"),
        "created_at": iso_from_epoch_ms(doc["createdAt"]),
    }


def to_api_todo(doc: dict[str, Any], user_id: str) -> dict[str, Any]:
    # Todo documents are returned without their owner; callers already know it
    return {
        "id": doc["id"],
        "user_id": doc.get("userId", user_id),
        "title": doc["title"],
        "completed": doc.get("completed", False),
        "created_at": iso_from_epoch_ms(doc["createdAt"]),
        "updated_at": iso_from_epoch_ms(doc["updatedAt"]),
    }


def to_api_content_tag(user_id: str, tag_id: str, link: dict[str, Any]) -> dict[str, Any]:
    # Links come from tags:getTopWithContent as {id, created_at}, already ISO-8601
    return {
        "user_id": user_id,
        "content_id": link["id"],
        "tag_id": tag_id,
        "created_at": link["created_at"],
    }


# ═══════════════════════════════════════════════════════════════════════════════
# RECORD CONSTRUCTORS
# ═══════════════════════════════════════════════════════════════════════════════


def to_content_record(doc: dict[str, Any]) -> ContentRecord:
    return ContentRecord.model_validate(to_api_content(doc))


def to_tag_record(doc: dict[str, Any]) -> TagRecord:
    return TagRecord.model_validate(to_api_tag(doc))


def to_user_record(doc: dict[str, Any]) -> UserRecord:
    return UserRecord.model_validate(to_api_user(doc))


def to_todo_record(doc: dict[str, Any], user_id: str) -> TodoRecord:
    return TodoRecord.model_validate(to_api_todo(doc, user_id))


def to_content_tag_record(user_id: str, tag_id: str, link: dict[str, Any]) -> ContentTagRecord:
    return ContentTagRecord.model_validate(to_api_content_tag(user_id, tag_id, link))
