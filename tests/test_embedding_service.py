"""Tests for embedding text building and cosine ranking."""

from datetime import datetime, timezone

import pytest

from cerebero.shared.models.enums import ContentType
from cerebero.shared.schemas.records import ContentRecord, EmbeddingCandidate
from cerebero.shared.services.content_service import ContentService
from cerebero.shared.services.embedding_service import EmbeddingService


NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_content(content_id: str, **overrides) -> ContentRecord:
    values = {
        "id": content_id,
        "user_id": "u1",
        "title": f"Title {content_id}",
        "type": ContentType.LINK,
        "url": "https://example.com",
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return ContentRecord(**values)


def candidate(content_id: str, embedding: list[float]) -> EmbeddingCandidate:
    return EmbeddingCandidate(content=make_content(content_id), embedding=embedding)


class TestBuildEmbeddingText:
    def test_document_uses_body(self):
        content = make_content("c1", type=ContentType.DOCUMENT, url=None, body="Body")
        assert EmbeddingService.build_embedding_text(content) == "Title c1\nBody"

    def test_link_uses_url(self):
        content = make_content("c1", body="ignored")
        assert EmbeddingService.build_embedding_text(content) == "Title c1\nhttps://example.com"

    def test_title_only(self):
        content = make_content("c1", type=ContentType.TWEET, url=None)
        assert EmbeddingService.build_embedding_text(content) == "Title c1"


class TestRank:
    def test_orders_by_score_and_applies_threshold(self):
        matches = EmbeddingService.rank(
            [1.0, 0.0],
            [
                candidate("weak", [0.5, 1.0]),
                candidate("exact", [2.0, 0.0]),
                candidate("close", [1.0, 0.3]),
                candidate("opposite", [-1.0, 0.0]),
            ],
            threshold=0.65,
            limit=5,
        )
        assert [match.content.id for match in matches] == ["exact", "close"]
        assert matches[0].score == pytest.approx(1.0)

    def test_limit(self):
        candidates = [candidate(f"c{n}", [1.0, n / 10]) for n in range(8)]
        matches = EmbeddingService.rank([1.0, 0.0], candidates, threshold=0.0, limit=5)
        assert [match.content.id for match in matches] == ["c0", "c1", "c2", "c3", "c4"]

    def test_skips_mismatched_and_zero_vectors(self):
        matches = EmbeddingService.rank(
            [1.0, 0.0],
            [
                candidate("short", [1.0]),
                candidate("zero", [0.0, 0.0]),
                candidate("ok", [1.0, 0.0]),
            ],
            threshold=0.65,
            limit=5,
        )
        assert [match.content.id for match in matches] == ["ok"]

    def test_empty_inputs(self):
        assert EmbeddingService.rank([1.0], [], threshold=0.0, limit=5) == []
        assert EmbeddingService.rank([0.0, 0.0], [candidate("c", [1.0, 0.0])], 0.0, 5) == []


class TestIndexContent:
    async def test_index_then_find(self, storage, settings, ai, alice):
        outcome = await ContentService(storage, settings).create(
            alice, "Python", ContentType.DOCUMENT, body="python"
        )
        service = EmbeddingService(storage.embeddings, ai)

        assert await service.index_content(alice, outcome.primary) is True
        # Re-indexing replaces the vector
        assert await service.index_content(alice, outcome.primary) is True
        assert len(await storage.embeddings.list_by_user(alice)) == 1

        matches = await service.find_similar(alice, "python", threshold=0.65, limit=5)
        assert [match.content.id for match in matches] == [outcome.primary.id]
        assert matches[0].score == pytest.approx(1.0)
