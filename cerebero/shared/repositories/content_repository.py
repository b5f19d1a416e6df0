"""
Content Repository

SQL implementation of ``ContentStore``.

Common Operations:
==================
- create() / create_many()          → Insert one item / a batch in one flush
- get_by_id()                       → Owned item or None
- list_by_user()                    → Newest-updated first
- list_favourites_by_user()         → Same, favourites only
- update()                          → Overwrite title/type/url/body
- toggle_favourite() / toggle_share()
- get_by_share_id()                 → Public lookup (is_shared required)
- delete()                          → Tag links → embedding → content row
- search_text()                     → Case-insensitive title/body substring
- list_by_tag()                     → Page of content linked to one tag

Cascade Delete:
===============
    DELETE FROM content_tags        WHERE user_id = :u AND content_id = :c
    DELETE FROM content_embeddings  WHERE user_id = :u AND content_id = :c
    DELETE FROM content             WHERE id = :c
All three run in the request's transaction, so an interruption leaves either
every row or none.
"""

from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from cerebero.shared.models.base import utcnow
from cerebero.shared.models.content import Content
from cerebero.shared.models.content_embedding import ContentEmbedding
from cerebero.shared.models.content_tag import ContentTag
from cerebero.shared.repositories.base import (
    BaseRepository,
    parse_id,
    require_id,
    storage_operation,
)
from cerebero.shared.schemas.records import ContentPage, ContentRecord, NewContent


class ContentRepository(BaseRepository[Content, ContentRecord]):
    """Repository for Content database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Content, ContentRecord, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # CREATE
    # ═══════════════════════════════════════════════════════════════════════════

    @storage_operation
    async def create(self, user_id: str, item: NewContent) -> ContentRecord:
        content = await self.insert(
            user_id=require_id(user_id, "user_id"),
            title=item.title,
            type=item.type,
            url=item.url,
            body=item.body,
            is_shared=False,
            is_favourite=False,
        )
        return self.to_record(content)

    @storage_operation
    async def create_many(self, user_id: str, items: list[NewContent]) -> int:
        """
        Insert a batch with one shared timestamp.

        SQL Generated:
            INSERT INTO content (...) VALUES (...), (...), ...
        """
        owner = require_id(user_id, "user_id")
        now = utcnow()
        self.session.add_all(
            [
                Content(
                    user_id=owner,
                    title=item.title,
                    type=item.type,
                    url=item.url,
                    body=item.body,
                    is_shared=False,
                    is_favourite=False,
                    created_at=now,
                    updated_at=now,
                )
                for item in items
            ]
        )
        await self.session.flush()
        return len(items)

    # ═══════════════════════════════════════════════════════════════════════════
    # READ
    # ═══════════════════════════════════════════════════════════════════════════

    @storage_operation
    async def get_by_id(self, user_id: str, content_id: str) -> Optional[ContentRecord]:
        content = await self.get_owned(user_id, content_id)
        return self.to_record(content) if content else None

    @storage_operation
    async def list_by_user(self, user_id: str) -> list[ContentRecord]:
        rows = await self.list_owned(user_id, Content.updated_at.desc())
        return [self.to_record(row) for row in rows]

    @storage_operation
    async def list_favourites_by_user(self, user_id: str) -> list[ContentRecord]:
        rows = await self.list_owned(
            user_id,
            Content.updated_at.desc(),
            where=[Content.is_favourite.is_(True)],
        )
        return [self.to_record(row) for row in rows]

    @storage_operation
    async def get_by_share_id(self, share_id: str) -> Optional[ContentRecord]:
        """
        SQL Generated:
            SELECT * FROM content WHERE share_id = '...' AND is_shared = true
        """
        result = await self.session.execute(
            select(Content).where(
                Content.share_id == share_id,
                Content.is_shared.is_(True),
            )
        )
        content = result.scalar_one_or_none()
        return self.to_record(content) if content else None

    @storage_operation
    async def search_text(self, user_id: str, query: str, limit: int) -> list[ContentRecord]:
        """
        SQL Generated:
            SELECT * FROM content
            WHERE user_id = '...'
              AND (lower(title) LIKE '%rust%' OR lower(body) LIKE '%rust%')
            ORDER BY updated_at DESC LIMIT 5
        """
        needle = query.strip()
        if not needle:
            return []
        rows = await self.list_owned(
            user_id,
            Content.updated_at.desc(),
            where=[
                or_(
                    Content.title.icontains(needle, autoescape=True),
                    Content.body.icontains(needle, autoescape=True),
                )
            ],
            limit=max(1, limit),
        )
        return [self.to_record(row) for row in rows]

    @storage_operation
    async def list_by_tag(
        self, user_id: str, tag_id: str, limit: int, offset: int
    ) -> ContentPage:
        """
        SQL Generated:
            SELECT content.* FROM content
            JOIN content_tags ON content_tags.content_id = content.id
            WHERE content_tags.user_id = '...' AND content_tags.tag_id = '...'
            ORDER BY content.updated_at DESC LIMIT 10 OFFSET 0
        """
        owner = parse_id(user_id)
        tag_key = parse_id(tag_id)
        if owner is None or tag_key is None:
            return ContentPage(items=[], total=0)

        filters = [
            ContentTag.user_id == owner,
            ContentTag.tag_id == tag_key,
            Content.user_id == owner,
        ]

        total_result = await self.session.execute(
            select(sql_count())
            .select_from(Content)
            .join(ContentTag, ContentTag.content_id == Content.id)
            .where(*filters)
        )
        total = total_result.scalar() or 0

        page_result = await self.session.execute(
            select(Content)
            .join(ContentTag, ContentTag.content_id == Content.id)
            .where(*filters)
            .order_by(Content.updated_at.desc())
            .offset(offset)
            .limit(limit)
        )
        items = [self.to_record(row) for row in page_result.scalars().all()]
        return ContentPage(items=items, total=total)

    # ═══════════════════════════════════════════════════════════════════════════
    # UPDATE
    # ═══════════════════════════════════════════════════════════════════════════

    @storage_operation
    async def update(
        self, user_id: str, content_id: str, item: NewContent
    ) -> Optional[ContentRecord]:
        content = await self.get_owned(user_id, content_id)
        if content is None:
            return None

        content.title = item.title
        content.type = item.type
        content.url = item.url
        content.body = item.body
        content.updated_at = utcnow()
        return self.to_record(await self.save(content))

    @storage_operation
    async def toggle_favourite(self, user_id: str, content_id: str) -> Optional[ContentRecord]:
        content = await self.get_owned(user_id, content_id)
        if content is None:
            return None

        content.is_favourite = not content.is_favourite
        content.updated_at = utcnow()
        return self.to_record(await self.save(content))

    @storage_operation
    async def toggle_share(
        self, user_id: str, content_id: str, new_share_id: str
    ) -> Optional[ContentRecord]:
        content = await self.get_owned(user_id, content_id)
        if content is None:
            return None

        content.is_shared = not content.is_shared
        if content.is_shared and content.share_id is None:
            content.share_id = new_share_id
        content.updated_at = utcnow()
        return self.to_record(await self.save(content))

    # ═══════════════════════════════════════════════════════════════════════════
    # DELETE
    # ═══════════════════════════════════════════════════════════════════════════

    @storage_operation
    async def delete(self, user_id: str, content_id: str) -> bool:
        content = await self.get_owned(user_id, content_id)
        if content is None:
            return False

        await self.session.execute(
            delete(ContentTag).where(
                ContentTag.user_id == content.user_id,
                ContentTag.content_id == content.id,
            )
        )
        await self.session.execute(
            delete(ContentEmbedding).where(
                ContentEmbedding.user_id == content.user_id,
                ContentEmbedding.content_id == content.id,
            )
        )
        await self.remove(content)
        return True
