"""Tests for ContentService against both storage backends."""

import pytest

from cerebero.shared.core.exceptions import (
    ContentNotFoundError,
    StorageUnavailableError,
    TagNotFoundError,
    ValidationError,
)
from cerebero.shared.models.enums import ContentType
from cerebero.shared.repositories.content_tag_repository import ContentTagRepository
from cerebero.shared.repositories.embedding_repository import EmbeddingRepository
from cerebero.shared.services.content_service import ContentService


@pytest.fixture
def service(storage, settings, ai):
    return ContentService(storage, settings, ai)


async def _create(service, user_id, title="Rust Book", tags=None, **kwargs):
    kwargs.setdefault("type", ContentType.LINK)
    kwargs.setdefault("url", "https://doc.rust-lang.org/book/")
    outcome = await service.create(user_id, title, tags=tags, **kwargs)
    return outcome.primary


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreate:
    async def test_create_embeds_and_tags(self, service, storage, ai, alice):
        outcome = await service.create(
            alice,
            "  Rust Book ",
            ContentType.LINK,
            url="https://doc.rust-lang.org/book/",
            tags=["Rust", "rust ", "Programming", "  "],
        )

        assert outcome.primary.title == "Rust Book"
        assert outcome.primary.is_shared is False
        assert outcome.primary.share_id is None
        assert sorted(tag.name for tag in outcome.tags) == ["programming", "rust"]
        assert outcome.failures == []
        assert [effect.name for effect in outcome.side_effects] == [
            "embedding",
            "tag:rust",
            "tag:programming",
        ]

        # Links carry the url as embedding payload
        assert ai.embed_calls == ["Rust Book\nhttps://doc.rust-lang.org/book/"]
        stored = await storage.embeddings.list_by_user(alice)
        assert [candidate.content.id for candidate in stored] == [outcome.primary.id]

        tags = await storage.tags.list_by_content(alice, outcome.primary.id)
        assert [tag.name for tag in tags] == ["programming", "rust"]

    async def test_embedding_failure_keeps_the_item(self, service, storage, ai, alice):
        ai.fail = True
        outcome = await service.create(alice, "Notes", ContentType.DOCUMENT, body="hello", tags=["x"])

        assert [effect.name for effect in outcome.failures] == ["embedding"]
        assert await storage.content.get_by_id(alice, outcome.primary.id) is not None
        assert [tag.name for tag in outcome.tags] == ["x"]

    async def test_without_ai_embedding_is_skipped(self, storage, settings, alice):
        outcome = await ContentService(storage, settings).create(alice, "Plain", ContentType.TWEET)
        assert [effect.name for effect in outcome.failures] == ["embedding"]

    async def test_blank_title_is_rejected(self, service, alice):
        with pytest.raises(ValidationError) as exc_info:
            await service.create(alice, "   ", ContentType.LINK)
        assert exc_info.value.details["field"] == "title"

    async def test_unknown_type_is_rejected(self, service, alice):
        with pytest.raises(ValidationError) as exc_info:
            await service.create(alice, "Title", "podcast")
        assert exc_info.value.details["field"] == "type"


# ---------------------------------------------------------------------------
# Side effects inside the SQL transaction
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("backend", ["sql"], indirect=True)
class TestSideEffectSavepoints:
    async def test_failed_embedding_write_is_undone_and_content_commits(
        self, backend, settings, ai, monkeypatch
    ):
        real_upsert = EmbeddingRepository.upsert

        async def upsert_then_fail(self, user_id, content_id, embedding):
            await real_upsert(self, user_id, content_id, embedding)
            raise StorageUnavailableError()

        monkeypatch.setattr(EmbeddingRepository, "upsert", upsert_then_fail)

        async with backend.session() as storage:
            user = await storage.users.create("carol@example.com", "Carol", "not-a-real-hash")
            outcome = await ContentService(storage, settings, ai).create(
                user.id, "Rust Book", ContentType.LINK, url="https://rust.example", tags=["rust"]
            )
        assert [effect.name for effect in outcome.failures] == ["embedding"]

        monkeypatch.undo()
        async with backend.session() as storage:
            assert await storage.content.get_by_id(user.id, outcome.primary.id) is not None
            assert await storage.embeddings.list_by_user(user.id) == []
            tags = await storage.tags.list_by_content(user.id, outcome.primary.id)
            assert [tag.name for tag in tags] == ["rust"]

    async def test_failed_tag_link_is_undone(self, backend, settings, ai, monkeypatch):
        async def attach_fails(self, user_id, content_id, tag_id):
            raise StorageUnavailableError()

        monkeypatch.setattr(ContentTagRepository, "attach", attach_fails)

        async with backend.session() as storage:
            user = await storage.users.create("carol@example.com", "Carol", "not-a-real-hash")
            outcome = await ContentService(storage, settings, ai).create(
                user.id, "Rust Book", ContentType.LINK, tags=["rust"]
            )
        assert [effect.name for effect in outcome.failures] == ["tag:rust"]

        monkeypatch.undo()
        async with backend.session() as storage:
            assert await storage.content.get_by_id(user.id, outcome.primary.id) is not None
            # the tag created in the failed step is rolled back with it
            assert await storage.tags.list_by_user(user.id) == []


# ---------------------------------------------------------------------------
# Reads, edit, delete
# ---------------------------------------------------------------------------


class TestReadEditDelete:
    async def test_list_is_scoped_to_owner(self, service, alice, bob):
        first = await _create(service, alice, "One")
        second = await _create(service, alice, "Two")
        await _create(service, bob, "Bob's")

        items = await service.list_by_user(alice)
        assert {item.id for item in items} == {first.id, second.id}
        assert await service.list_by_user("nobody") == []

    async def test_other_users_content_is_not_found(self, service, alice, bob):
        item = await _create(service, alice)
        with pytest.raises(ContentNotFoundError):
            await service.get(bob, item.id)
        with pytest.raises(ContentNotFoundError):
            await service.edit(bob, item.id, "Hijacked", ContentType.LINK)
        with pytest.raises(ContentNotFoundError):
            await service.delete(bob, item.id)
        assert (await service.get(alice, item.id)).title == "Rust Book"

    async def test_edit_overwrites_fields(self, service, alice):
        item = await _create(service, alice)
        edited = await service.edit(alice, item.id, "Notes", ContentType.DOCUMENT, body="Body text")

        assert edited.title == "Notes"
        assert edited.type == ContentType.DOCUMENT
        assert edited.url is None
        assert edited.body == "Body text"
        assert edited.updated_at >= item.updated_at

    async def test_delete_cascades_to_links_and_embedding(self, service, storage, alice):
        item = await _create(service, alice, tags=["rust"])
        await service.delete(alice, item.id)

        with pytest.raises(ContentNotFoundError):
            await service.get(alice, item.id)
        assert await storage.content_tags.list_by_user(alice) == []
        assert await storage.embeddings.list_by_user(alice) == []
        # The tag itself survives
        assert [tag.name for tag in await storage.tags.list_by_user(alice)] == ["rust"]

    async def test_delete_twice_is_not_found(self, service, alice):
        item = await _create(service, alice)
        await service.delete(alice, item.id)
        with pytest.raises(ContentNotFoundError):
            await service.delete(alice, item.id)

    async def test_favourites(self, service, alice):
        item = await _create(service, alice)
        await _create(service, alice, "Other")

        toggled = await service.toggle_favourite(alice, item.id)
        assert toggled.is_favourite is True
        assert [fav.id for fav in await service.list_favourites(alice)] == [item.id]

        assert (await service.toggle_favourite(alice, item.id)).is_favourite is False
        assert await service.list_favourites(alice) == []


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------


class TestSharing:
    async def test_share_round_trip_keeps_share_id(self, service, alice):
        item = await _create(service, alice)

        shared = await service.toggle_share(alice, item.id)
        assert shared.is_shared is True
        assert shared.share_id
        assert service.share_url(shared) == f"https://cerebero.test/shared/{shared.share_id}"
        assert (await service.get_shared(shared.share_id)).id == item.id

        unshared = await service.toggle_share(alice, item.id)
        assert unshared.is_shared is False
        assert unshared.share_id == shared.share_id
        assert service.share_url(unshared) is None
        with pytest.raises(ContentNotFoundError):
            await service.get_shared(shared.share_id)

        reshared = await service.toggle_share(alice, item.id)
        assert reshared.share_id == shared.share_id

    async def test_share_status(self, service, alice):
        item = await _create(service, alice)
        assert (await service.share_status(alice, item.id)).is_shared is False

        shared = await service.toggle_share(alice, item.id)
        status = await service.share_status(alice, item.id)
        assert status.is_shared is True
        assert status.share_id == shared.share_id
        assert status.share_url.endswith(shared.share_id)

    async def test_unknown_share_id(self, service):
        with pytest.raises(ContentNotFoundError):
            await service.get_shared("does-not-exist")
        with pytest.raises(ContentNotFoundError):
            await service.get_shared("")

    async def test_toggle_share_on_foreign_content(self, service, alice, bob):
        item = await _create(service, alice)
        with pytest.raises(ContentNotFoundError):
            await service.toggle_share(bob, item.id)


# ---------------------------------------------------------------------------
# Content by tag
# ---------------------------------------------------------------------------


class TestListByTag:
    async def test_pages_through_tagged_content(self, service, alice):
        ids = {(await _create(service, alice, f"Item {n}", tags=["reading"])).id for n in range(3)}
        await _create(service, alice, "Untagged")

        tag, first = await service.list_by_tag(alice, "Reading", limit=2, offset=0)
        assert tag.name == "reading"
        assert first.total == 3
        assert len(first.items) == 2

        _, second = await service.list_by_tag(alice, "reading", limit=2, offset=2)
        assert len(second.items) == 1
        assert {item.id for item in first.items + second.items} == ids

        _, past_end = await service.list_by_tag(alice, "reading", limit=2, offset=10)
        assert past_end.items == []
        assert past_end.total == 3

    async def test_unknown_tag(self, service, alice, bob):
        await _create(service, bob, tags=["private"])
        with pytest.raises(TagNotFoundError):
            await service.list_by_tag(alice, "private")
        with pytest.raises(TagNotFoundError):
            await service.list_by_tag(alice, "   ")

    @pytest.mark.parametrize("limit,offset", [(0, 0), (-1, 0), (10, -1)])
    async def test_bad_paging(self, service, alice, limit, offset):
        with pytest.raises(ValidationError):
            await service.list_by_tag(alice, "reading", limit=limit, offset=offset)


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


class TestImport:
    async def test_imports_every_item(self, service, alice):
        count = await service.import_content(
            alice,
            [
                {"type": "link", "title": "A", "url": "https://a.example"},
                {"type": " Document ", "title": "B", "body": "text"},
            ],
        )
        assert count == 2
        items = await service.list_by_user(alice)
        assert sorted(item.title for item in items) == ["A", "B"]
        assert {item.type for item in items} == {ContentType.LINK, ContentType.DOCUMENT}

    async def test_one_bad_item_rejects_the_batch(self, service, alice):
        with pytest.raises(ValidationError) as exc_info:
            await service.import_content(
                alice,
                [
                    {"type": "link", "title": "Fine"},
                    {"type": "link", "title": "  "},
                ],
            )
        assert exc_info.value.details == {"index": 1, "field": "title"}
        assert await service.list_by_user(alice) == []

    async def test_missing_and_unknown_type(self, service, alice):
        with pytest.raises(ValidationError) as exc_info:
            await service.import_content(alice, [{"title": "No type"}])
        assert exc_info.value.details == {"index": 0, "field": "type"}

        with pytest.raises(ValidationError) as exc_info:
            await service.import_content(alice, [{"type": "podcast", "title": "Odd"}])
        assert exc_info.value.details["index"] == 0
        assert exc_info.value.details["field"] == "type"

    async def test_empty_batch(self, service, alice):
        with pytest.raises(ValidationError):
            await service.import_content(alice, [])
