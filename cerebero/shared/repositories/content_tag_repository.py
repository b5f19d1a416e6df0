"""
ContentTag Repository

SQL implementation of ``ContentTagStore``. Attach is idempotent at the
storage level: a duplicate link is reported as ``False`` rather than an
error, and the caller decides whether that is a conflict.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cerebero.shared.models.content_tag import ContentTag
from cerebero.shared.repositories.base import (
    BaseRepository,
    parse_id,
    require_id,
    storage_operation,
)
from cerebero.shared.schemas.records import ContentTagRecord


class ContentTagRepository(BaseRepository[ContentTag, ContentTagRecord]):
    """Repository for ContentTag database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ContentTag, ContentTagRecord, session)

    @storage_operation
    async def attach(self, user_id: str, content_id: str, tag_id: str) -> bool:
        """
        SQL Generated:
            SELECT count(*) FROM content_tags WHERE user_id = .. AND content_id = .. AND tag_id = ..
            SAVEPOINT sa_savepoint_1
            INSERT INTO content_tags (...) VALUES (...)
            RELEASE SAVEPOINT sa_savepoint_1
        """
        owner = require_id(user_id, "user_id")
        content_key = require_id(content_id, "content_id")
        tag_key = require_id(tag_id, "tag_id")

        existing = await self.count(
            ContentTag.user_id == owner,
            ContentTag.content_id == content_key,
            ContentTag.tag_id == tag_key,
        )
        if existing:
            return False

        try:
            async with self.session.begin_nested():
                self.session.add(
                    ContentTag(user_id=owner, content_id=content_key, tag_id=tag_key)
                )
                await self.session.flush()
        except IntegrityError:
            return False
        return True

    @storage_operation
    async def detach(self, user_id: str, content_id: str, tag_id: str) -> bool:
        owner = parse_id(user_id)
        content_key = parse_id(content_id)
        tag_key = parse_id(tag_id)
        if owner is None or content_key is None or tag_key is None:
            return False

        result = await self.session.execute(
            delete(ContentTag).where(
                ContentTag.user_id == owner,
                ContentTag.content_id == content_key,
                ContentTag.tag_id == tag_key,
            )
        )
        return (result.rowcount or 0) > 0

    @storage_operation
    async def list_by_user(self, user_id: str) -> list[ContentTagRecord]:
        rows = await self.list_owned(user_id, ContentTag.created_at.desc())
        return [self.to_record(row) for row in rows]
