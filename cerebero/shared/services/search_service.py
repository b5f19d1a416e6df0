"""
Search Service

Text and AI-assisted search over a user's content and tags.

Modes:
======
- text: case-insensitive substring match on content title/body (newest
  first, ``SEARCH_RESULT_LIMIT`` items) followed by tags whose name contains
  the query (``SEARCH_RESULT_LIMIT`` tags, by name)
- ai:   embed the query, rank the user's stored vectors by cosine similarity,
  keep scores >= ``SEMANTIC_SEARCH_THRESHOLD``, best ``SEARCH_RESULT_LIMIT``

A blank query returns no results without touching storage. If the AI path
fails for any reason the search still succeeds, with no results.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from cerebero.config.settings import Settings
from cerebero.shared.adapters.openai_adapter import OpenAIAdapter
from cerebero.shared.core.logging import get_logger
from cerebero.shared.models.enums import ContentType, SearchResultType
from cerebero.shared.repositories.ports import Storage
from cerebero.shared.schemas.records import ContentRecord, TagRecord
from cerebero.shared.services.embedding_service import EmbeddingService
from cerebero.shared.utils.text import truncate


logger = get_logger(__name__)

DESCRIPTION_LENGTH = 60
TAGS_URL = "/tags"


@dataclass
class SearchHit:
    id: str
    type: SearchResultType
    title: str
    url: str
    description: Optional[str] = None
    content_type: Optional[ContentType] = None
    is_favourite: Optional[bool] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_content(cls, content: ContentRecord) -> "SearchHit":
        return cls(
            id=content.id,
            type=SearchResultType.CONTENT,
            title=content.title,
            url=content.url or f"/content/{content.id}",
            description=truncate(content.body, DESCRIPTION_LENGTH),
            content_type=content.type,
            is_favourite=content.is_favourite,
            created_at=content.created_at,
        )

    @classmethod
    def from_tag(cls, tag: TagRecord) -> "SearchHit":
        return cls(id=tag.id, type=SearchResultType.TAG, title=tag.name, url=TAGS_URL)


class SearchService:
    def __init__(
        self,
        storage: Storage,
        settings: Settings,
        ai: Optional[OpenAIAdapter] = None,
    ) -> None:
        self.storage = storage
        self.settings = settings
        self.ai = ai

    async def search(self, user_id: str, query: str, use_ai: bool = False) -> list[SearchHit]:
        query = (query or "").strip()
        if not query:
            return []
        if use_ai:
            return await self.semantic_search(user_id, query)
        return await self.text_search(user_id, query)

    async def text_search(self, user_id: str, query: str) -> list[SearchHit]:
        limit = self.settings.SEARCH_RESULT_LIMIT
        content = await self.storage.content.search_text(user_id, query, limit)

        needle = query.lower()
        tags = [tag for tag in await self.storage.tags.list_by_user(user_id) if needle in tag.name]

        return [SearchHit.from_content(item) for item in content[:limit]] + [
            SearchHit.from_tag(tag) for tag in tags[:limit]
        ]

    async def semantic_search(self, user_id: str, query: str) -> list[SearchHit]:
        if self.ai is None:
            logger.warning("semantic_search_unavailable", user_id=user_id, reason="no AI adapter")
            return []

        service = EmbeddingService(self.storage.embeddings, self.ai)
        try:
            matches = await service.find_similar(
                user_id,
                query,
                threshold=self.settings.SEMANTIC_SEARCH_THRESHOLD,
                limit=self.settings.SEARCH_RESULT_LIMIT,
            )
        except Exception as e:
            logger.error("semantic_search_failed", user_id=user_id, error=str(e), exc_info=True)
            return []

        return [SearchHit.from_content(match.content) for match in matches]
