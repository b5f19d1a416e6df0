"""
Embedding service - Vector embedding operations.

Provides:
- Embedding text construction for content
- Embedding generation via the AI adapter and storage via the embedding store
- Cosine similarity ranking of a user's stored embeddings (numpy)

Ranking happens here rather than in the store so both storage backends
return identical results for the same vectors.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from cerebero.shared.adapters.openai_adapter import OpenAIAdapter
from cerebero.shared.core.logging import get_logger
from cerebero.shared.models.enums import ContentType
from cerebero.shared.repositories.ports import EmbeddingStore
from cerebero.shared.schemas.records import ContentRecord, EmbeddingCandidate


logger = get_logger(__name__)


@dataclass
class EmbeddingMatch:
    """A stored item scored against a query vector."""

    content: ContentRecord
    score: float


class EmbeddingService:
    """
    Service for embedding operations.

    Handles:
    - Building embedding input text from content
    - Generating and storing vectors
    - Similarity search over a user's vectors
    """

    def __init__(self, embeddings: EmbeddingStore, ai: OpenAIAdapter) -> None:
        """
        Initialize embedding service.

        Args:
            embeddings: Embedding store of the current unit of work
            ai: AI adapter used to embed text
        """
        self.embeddings = embeddings
        self.ai = ai

    @staticmethod
    def build_embedding_text(content: ContentRecord) -> str:
        """
        Title plus the field that carries the payload for the content type.

        Documents embed their body; every other type embeds its url.
        """
        payload = content.body if content.type == ContentType.DOCUMENT else content.url
        if not payload:
            return content.title
        return f"{content.title}\n{payload}"

    async def index_content(self, user_id: str, content: ContentRecord) -> bool:
        """
        Embed ``content`` and store the vector.

        Returns False if the content disappeared before the vector was
        written. Provider and storage failures propagate.
        """
        vector = await self.ai.embed(self.build_embedding_text(content))
        stored = await self.embeddings.upsert(user_id, content.id, vector)
        if not stored:
            logger.warning("embedding_content_missing", user_id=user_id, content_id=content.id)
        return stored

    async def find_similar(
        self,
        user_id: str,
        query: str,
        threshold: float,
        limit: int,
    ) -> list[EmbeddingMatch]:
        """Embed ``query`` and rank the user's stored vectors against it."""
        query_vector = await self.ai.embed(query)
        candidates = await self.embeddings.list_by_user(user_id)
        return self.rank(query_vector, candidates, threshold=threshold, limit=limit)

    @staticmethod
    def rank(
        query_vector: list[float],
        candidates: list[EmbeddingCandidate],
        threshold: float,
        limit: int,
    ) -> list[EmbeddingMatch]:
        """
        Score candidates by cosine similarity, keep those at or above
        ``threshold``, best first, at most ``limit``.

        Vectors whose dimension differs from the query (e.g. written by an
        older embedding model) and zero vectors are skipped.
        """
        query = np.asarray(query_vector, dtype=np.float64)
        query_norm = np.linalg.norm(query)
        if not candidates or query.size == 0 or query_norm == 0:
            return []

        matches: list[EmbeddingMatch] = []
        for candidate in candidates:
            score = _cosine(query, query_norm, candidate.embedding)
            if score is not None and score >= threshold:
                matches.append(EmbeddingMatch(content=candidate.content, score=score))

        matches.sort(key=lambda match: match.score, reverse=True)
        return matches[:limit]


def _cosine(query: np.ndarray, query_norm: float, values: list[float]) -> Optional[float]:
    vector = np.asarray(values, dtype=np.float64)
    if vector.shape != query.shape:
        return None
    norm = np.linalg.norm(vector)
    if norm == 0:
        return None
    return float(np.dot(query, vector) / (query_norm * norm))
