"""Tests for TagService: CRUD, content links, top tags and suggestions."""

import pytest

from cerebero.shared.core.exceptions import (
    ConflictError,
    ContentNotFoundError,
    TagNotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from cerebero.shared.models.enums import ContentType
from cerebero.shared.services.content_service import ContentService
from cerebero.shared.services.tag_service import MAX_TOP_LIMIT, TagService, parse_suggestions


@pytest.fixture
def tags(storage, ai):
    return TagService(storage, ai)


@pytest.fixture
def content(storage, settings):
    return ContentService(storage, settings)


async def _item(content, user_id, title="Item", tags=None):
    outcome = await content.create(user_id, title, ContentType.LINK, url="https://x.example", tags=tags)
    return outcome.primary


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


class TestTagCrud:
    async def test_get_or_create_is_idempotent(self, tags, alice):
        tag, created = await tags.get_or_create(alice, "  Python ")
        assert created is True
        assert tag.name == "python"

        again, created = await tags.get_or_create(alice, "PYTHON")
        assert created is False
        assert again.id == tag.id
        assert len(await tags.list_by_user(alice)) == 1

    async def test_names_are_per_user(self, tags, alice, bob):
        mine, _ = await tags.get_or_create(alice, "python")
        theirs, created = await tags.get_or_create(bob, "python")
        assert created is True
        assert theirs.id != mine.id

    async def test_blank_name(self, tags, alice):
        with pytest.raises(ValidationError):
            await tags.get_or_create(alice, "   ")

    async def test_list_is_sorted_by_name(self, tags, alice):
        for name in ["zeta", "alpha", "mid"]:
            await tags.get_or_create(alice, name)
        assert [tag.name for tag in await tags.list_by_user(alice)] == ["alpha", "mid", "zeta"]
        assert await tags.list_by_user("nobody") == []

    async def test_rename(self, tags, alice):
        tag, _ = await tags.get_or_create(alice, "pyhton")
        renamed = await tags.rename(alice, tag.id, " Python ")
        assert renamed.id == tag.id
        assert renamed.name == "python"

    async def test_rename_to_existing_name_conflicts(self, tags, alice):
        await tags.get_or_create(alice, "python")
        other, _ = await tags.get_or_create(alice, "rust")
        with pytest.raises(ConflictError):
            await tags.rename(alice, other.id, "Python")

    async def test_rename_foreign_tag(self, tags, alice, bob):
        tag, _ = await tags.get_or_create(alice, "python")
        with pytest.raises(TagNotFoundError):
            await tags.rename(bob, tag.id, "mine")

    async def test_delete_removes_links(self, tags, content, storage, alice):
        item = await _item(content, alice, tags=["python", "rust"])
        python = await storage.tags.get_by_name(alice, "python")

        await tags.delete(alice, python.id)

        assert [tag.name for tag in await tags.list_for_content(alice, item.id)] == ["rust"]
        with pytest.raises(TagNotFoundError):
            await tags.delete(alice, python.id)


# ---------------------------------------------------------------------------
# Content links
# ---------------------------------------------------------------------------


class TestContentLinks:
    async def test_attach_and_detach(self, tags, content, alice):
        item = await _item(content, alice)
        tag, _ = await tags.get_or_create(alice, "python")

        await tags.attach(alice, item.id, tag.id)
        assert [t.id for t in await tags.list_for_content(alice, item.id)] == [tag.id]

        with pytest.raises(ConflictError):
            await tags.attach(alice, item.id, tag.id)

        assert await tags.detach(alice, item.id, tag.id) is True
        # Detaching again still succeeds
        assert await tags.detach(alice, item.id, tag.id) is False
        assert await tags.list_for_content(alice, item.id) == []

    async def test_attach_requires_owned_content_and_tag(self, tags, content, alice, bob):
        item = await _item(content, alice)
        mine, _ = await tags.get_or_create(alice, "python")
        theirs, _ = await tags.get_or_create(bob, "python")

        with pytest.raises(TagNotFoundError):
            await tags.attach(alice, item.id, theirs.id)
        with pytest.raises(ContentNotFoundError):
            await tags.attach(bob, item.id, theirs.id)
        with pytest.raises(TagNotFoundError):
            await tags.detach(alice, item.id, theirs.id)
        with pytest.raises(ContentNotFoundError):
            await tags.list_for_content(bob, item.id)
        assert mine.id != theirs.id

    async def test_replace_for_content(self, tags, content, alice):
        item = await _item(content, alice, tags=["python", "old"])

        result = await tags.replace_for_content(alice, item.id, ["Python", "new", "NEW", ""])

        assert [tag.name for tag in result] == ["new", "python"]
        assert [tag.name for tag in await tags.list_for_content(alice, item.id)] == ["new", "python"]

    async def test_replace_with_empty_set(self, tags, content, alice):
        item = await _item(content, alice, tags=["python"])
        assert await tags.replace_for_content(alice, item.id, []) == []
        assert await tags.list_for_content(alice, item.id) == []


# ---------------------------------------------------------------------------
# Top tags
# ---------------------------------------------------------------------------


class TestTopWithContent:
    async def test_ranks_by_usage_then_name(self, tags, content, alice, bob):
        first = await _item(content, alice, "First", tags=["python", "rust"])
        second = await _item(content, alice, "Second", tags=["python", "go"])
        await _item(content, alice, "Third", tags=["rust"])
        await tags.get_or_create(alice, "unused")
        await _item(content, bob, "Bob's", tags=["python"])

        summaries = await tags.top_with_content(alice, tag_limit=10, content_limit=10)

        assert [(s.tag.name, s.usage_count) for s in summaries] == [
            ("python", 2),
            ("rust", 2),
            ("go", 1),
            ("unused", 0),
        ]
        python = summaries[0]
        assert {item.id for item in python.content} == {first.id, second.id}
        assert summaries[-1].content == []

    async def test_limits(self, tags, content, alice):
        for n in range(3):
            await _item(content, alice, f"Item {n}", tags=["a", "b", "c"])

        summaries = await tags.top_with_content(alice, tag_limit=2, content_limit=1)
        assert [s.tag.name for s in summaries] == ["a", "b"]
        assert all(s.usage_count == 3 for s in summaries)
        assert all(len(s.content) == 1 for s in summaries)

    async def test_no_tags(self, tags, alice):
        assert await tags.top_with_content(alice) == []

    def test_clamp_limit(self):
        assert TagService.clamp_limit(5, "tagLimit") == 5
        assert TagService.clamp_limit(500, "tagLimit") == MAX_TOP_LIMIT
        with pytest.raises(ValidationError) as exc_info:
            TagService.clamp_limit(0, "contentLimit")
        assert exc_info.value.details == {"field": "contentLimit"}


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


class TestSuggestions:
    async def test_suggest_uses_title(self, tags, ai):
        assert await tags.suggest("  Intro to Rust ") == ["alpha", "beta"]
        _, prompt = ai.complete_calls[0]
        assert "Intro to Rust" in prompt

    async def test_blank_title(self, tags, ai):
        with pytest.raises(ValidationError):
            await tags.suggest("  ")
        assert ai.complete_calls == []

    async def test_provider_failure_surfaces(self, tags, ai):
        ai.fail = True
        with pytest.raises(UpstreamUnavailableError):
            await tags.suggest("Rust")

    @pytest.mark.parametrize(
        "reply,expected",
        [
            ("rust, programming, systems", ["rust", "programming", "systems"]),
            ("Rust, RUST, \"books\".", ["rust", "books"]),
            ("one, two words, 3d, four, five", ["one", "four", "five"]),
            ("", []),
        ],
    )
    def test_parse_suggestions(self, reply, expected):
        assert parse_suggestions(reply) == expected
