"""
Embedding Repository

SQL implementation of ``EmbeddingStore``. Vectors are plain JSON arrays;
ranking happens in ``EmbeddingService`` rather than in the database.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cerebero.shared.models.base import utcnow
from cerebero.shared.models.content import Content
from cerebero.shared.models.content_embedding import ContentEmbedding
from cerebero.shared.repositories.base import (
    BaseRepository,
    parse_id,
    storage_operation,
)
from cerebero.shared.schemas.records import ContentRecord, EmbeddingCandidate


class EmbeddingRepository(BaseRepository[ContentEmbedding, EmbeddingCandidate]):
    """Repository for ContentEmbedding database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ContentEmbedding, EmbeddingCandidate, session)

    @storage_operation
    async def upsert(self, user_id: str, content_id: str, embedding: list[float]) -> bool:
        owner = parse_id(user_id)
        content_key = parse_id(content_id)
        if owner is None or content_key is None:
            return False

        content = await self.session.execute(
            select(Content.id).where(Content.id == content_key, Content.user_id == owner)
        )
        if content.scalar_one_or_none() is None:
            return False

        result = await self.session.execute(
            select(ContentEmbedding).where(
                ContentEmbedding.user_id == owner,
                ContentEmbedding.content_id == content_key,
            )
        )
        existing = result.scalar_one_or_none()

        async with self.session.begin_nested():
            if existing is None:
                self.session.add(
                    ContentEmbedding(
                        user_id=owner,
                        content_id=content_key,
                        embedding=list(embedding),
                    )
                )
            else:
                existing.embedding = list(embedding)
                existing.updated_at = utcnow()
            await self.session.flush()
        return True

    @storage_operation
    async def list_by_user(self, user_id: str) -> list[EmbeddingCandidate]:
        """
        SQL Generated:
            SELECT content_embeddings.embedding, content.* FROM content_embeddings
            JOIN content ON content.id = content_embeddings.content_id
            WHERE content_embeddings.user_id = '...' AND content.user_id = '...'
        """
        owner = parse_id(user_id)
        if owner is None:
            return []

        result = await self.session.execute(
            select(ContentEmbedding.embedding, Content)
            .join(Content, Content.id == ContentEmbedding.content_id)
            .where(ContentEmbedding.user_id == owner, Content.user_id == owner)
        )
        return [
            EmbeddingCandidate(
                content=ContentRecord.model_validate(content),
                embedding=vector,
            )
            for vector, content in result.all()
        ]
