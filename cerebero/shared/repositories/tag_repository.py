"""
Tag Repository

SQL implementation of ``TagStore``.

Get-or-create:
==============
    1. SELECT the (user_id, name) row
    2. if absent, INSERT inside a SAVEPOINT
    3. if the INSERT hits the unique constraint (a concurrent request won),
       roll back to the savepoint and SELECT again

The savepoint keeps the outer request transaction usable after the
violation, so the caller never sees the race.
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cerebero.shared.core.exceptions import ConflictError
from cerebero.shared.core.logging import get_logger
from cerebero.shared.models.base import utcnow
from cerebero.shared.models.content_tag import ContentTag
from cerebero.shared.models.tag import Tag
from cerebero.shared.repositories.base import (
    BaseRepository,
    parse_id,
    require_id,
    storage_operation,
)
from cerebero.shared.schemas.records import TagRecord


logger = get_logger(__name__)


class TagRepository(BaseRepository[Tag, TagRecord]):
    """Repository for Tag database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Tag, TagRecord, session)

    async def _find_by_name(self, user_id: str, name: str) -> Optional[Tag]:
        owner = parse_id(user_id)
        if owner is None:
            return None
        result = await self.session.execute(
            select(Tag).where(Tag.user_id == owner, Tag.name == name)
        )
        return result.scalar_one_or_none()

    # ═══════════════════════════════════════════════════════════════════════════
    # READ
    # ═══════════════════════════════════════════════════════════════════════════

    @storage_operation
    async def get_by_id(self, user_id: str, tag_id: str) -> Optional[TagRecord]:
        tag = await self.get_owned(user_id, tag_id)
        return self.to_record(tag) if tag else None

    @storage_operation
    async def get_by_name(self, user_id: str, name: str) -> Optional[TagRecord]:
        tag = await self._find_by_name(user_id, name)
        return self.to_record(tag) if tag else None

    @storage_operation
    async def list_by_user(self, user_id: str) -> list[TagRecord]:
        rows = await self.list_owned(user_id, Tag.name.asc())
        return [self.to_record(row) for row in rows]

    @storage_operation
    async def list_by_content(self, user_id: str, content_id: str) -> list[TagRecord]:
        """
        SQL Generated:
            SELECT tags.* FROM tags
            JOIN content_tags ON content_tags.tag_id = tags.id
            WHERE content_tags.user_id = '...' AND content_tags.content_id = '...'
            ORDER BY tags.name
        """
        owner = parse_id(user_id)
        content_key = parse_id(content_id)
        if owner is None or content_key is None:
            return []

        result = await self.session.execute(
            select(Tag)
            .join(ContentTag, ContentTag.tag_id == Tag.id)
            .where(
                ContentTag.user_id == owner,
                ContentTag.content_id == content_key,
                Tag.user_id == owner,
            )
            .order_by(Tag.name.asc())
        )
        return [self.to_record(row) for row in result.scalars().all()]

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE
    # ═══════════════════════════════════════════════════════════════════════════

    @storage_operation
    async def get_or_create(self, user_id: str, name: str) -> tuple[TagRecord, bool]:
        existing = await self._find_by_name(user_id, name)
        if existing is not None:
            return self.to_record(existing), False

        owner = require_id(user_id, "user_id")
        try:
            async with self.session.begin_nested():
                tag = Tag(user_id=owner, name=name)
                self.session.add(tag)
                await self.session.flush()
        except IntegrityError:
            logger.info("tag_create_race_lost", user_id=user_id, name=name)
            winner = await self._find_by_name(user_id, name)
            if winner is None:
                raise
            return self.to_record(winner), False

        await self.session.refresh(tag)
        return self.to_record(tag), True

    @storage_operation
    async def rename(self, user_id: str, tag_id: str, name: str) -> Optional[TagRecord]:
        tag = await self.get_owned(user_id, tag_id)
        if tag is None:
            return None

        duplicate = await self._find_by_name(user_id, name)
        if duplicate is not None and duplicate.id != tag.id:
            raise ConflictError(
                "A tag with this name already exists",
                details={"name": name},
            )

        tag.name = name
        tag.updated_at = utcnow()
        return self.to_record(await self.save(tag))

    @storage_operation
    async def delete(self, user_id: str, tag_id: str) -> bool:
        tag = await self.get_owned(user_id, tag_id)
        if tag is None:
            return False

        await self.session.execute(
            delete(ContentTag).where(
                ContentTag.user_id == tag.user_id,
                ContentTag.tag_id == tag.id,
            )
        )
        await self.remove(tag)
        return True
