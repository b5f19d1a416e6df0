"""Tests for the Convex client, document mapper and OpenAI adapter."""

import json
from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from cerebero.shared.adapters.convex_client import ConvexClient, ConvexFunctionError
from cerebero.shared.adapters.openai_adapter import OpenAIAdapter
from cerebero.shared.backends.convex import ConvexBackend
from cerebero.shared.backends.convex_mapper import (
    iso_from_epoch_ms,
    to_content_record,
    to_todo_record,
)
from cerebero.shared.core.exceptions import (
    ConflictError,
    StorageUnavailableError,
    UpstreamUnavailableError,
)
from cerebero.shared.models.enums import ContentType
from cerebero.shared.schemas.records import NewContent
from cerebero.shared.services.content_service import ContentService
from cerebero.shared.services.search_service import SearchService
from cerebero.shared.services.tag_service import TagService
from cerebero.shared.services.todo_service import TodoService

from conftest import make_settings
from fake_convex import SIGNATURES


def convex_client(handler, **kwargs) -> ConvexClient:
    return ConvexClient(
        "https://happy-otter-123.convex.cloud/",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# ConvexClient
# ---------------------------------------------------------------------------


class TestConvexClient:
    async def test_query_posts_function_call(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"status": "success", "value": [1, 2]})

        client = convex_client(handler, deploy_key="prod:abc")
        assert await client.query("content:listByUser", {"userId": "u1", "url": None}) == [1, 2]
        await client.close()

        request = seen[0]
        assert request.url.path == "/api/query"
        assert request.headers["Authorization"] == "Convex prod:abc"
        assert json.loads(request.content) == {
            "path": "content:listByUser",
            "args": {"userId": "u1"},
            "format": "json",
        }

    async def test_mutation_endpoint(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"status": "success", "value": None})

        client = convex_client(handler)
        assert await client.mutation("todos:createForUser", {}) is None
        assert paths == ["/api/mutation"]

    async def test_function_error(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"status": "error", "errorMessage": "ArgumentValidationError: bad id"},
            )

        with pytest.raises(ConvexFunctionError) as exc_info:
            await convex_client(handler).query("content:getByIdForUser", {})
        assert exc_info.value.path == "content:getByIdForUser"
        assert exc_info.value.is_argument_error

    @pytest.mark.parametrize(
        "handler",
        [
            lambda request: httpx.Response(503, text="down"),
            lambda request: httpx.Response(200, text="not json"),
        ],
    )
    async def test_transport_failures(self, handler):
        with pytest.raises(StorageUnavailableError):
            await convex_client(handler).query("users:getByEmail", {"email": "a@b.c"})

    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(StorageUnavailableError):
            await convex_client(handler).query("users:getByEmail", {"email": "a@b.c"})

    def test_requires_url(self):
        with pytest.raises(ValueError):
            ConvexClient("")


# ---------------------------------------------------------------------------
# ConvexBackend error translation
# ---------------------------------------------------------------------------


@pytest.fixture
async def convex(deployment):
    backend = ConvexBackend(make_settings(), transport=httpx.MockTransport(deployment.handle))
    yield backend
    await backend.shutdown()


class TestConvexBackend:
    async def test_malformed_id_reads_as_missing(self, convex):
        async with convex.session() as storage:
            assert await storage.content.get_by_id("u00000001", "not-a-convex-id") is None
            assert await storage.tags.list_by_user("3f1c0e9a-uuid") == []

    async def test_function_failure_is_storage_unavailable(self, convex, deployment):
        deployment.failures["content:listByUser"] = "Server Error"
        async with convex.session() as storage:
            with pytest.raises(StorageUnavailableError):
                await storage.content.list_by_user("u00000001")

    async def test_duplicate_email_is_conflict(self, convex):
        async with convex.session() as storage:
            await storage.users.create("a@example.com", "A", "hash")
            with pytest.raises(ConflictError):
                await storage.users.create("A@example.com", "A", "hash")

    async def test_ping(self, convex, deployment):
        assert await convex.ping() is True
        deployment.http_status = 500
        assert await convex.ping() is False

    def test_site_url_is_rewritten(self):
        settings = make_settings(CONVEX_URL="https://happy-otter-123.convex.site/")
        assert settings.convex_api_url == "https://happy-otter-123.convex.cloud"


# ---------------------------------------------------------------------------
# Convex function contract
# ---------------------------------------------------------------------------


class TestConvexContract:
    async def test_every_call_matches_a_deployment_function(self, convex, deployment, settings, ai):
        async with convex.session() as storage:
            user = (await storage.users.create("dana@example.com", "Dana", "hash")).id
            content = ContentService(storage, settings, ai)
            tags = TagService(storage, ai)
            search = SearchService(storage, settings, ai)
            todos = TodoService(storage.todos)

            item = (
                await content.create(user, "Rust Book", ContentType.LINK, url="https://rust.example", tags=["rust"])
            ).primary
            note = (await content.create(user, "Notes", ContentType.DOCUMENT, body="rust notes")).primary
            await content.edit(user, note.id, "Notes", ContentType.DOCUMENT, body="more rust notes")
            await content.toggle_favourite(user, item.id)
            await content.list_favourites(user)
            shared = await content.toggle_share(user, item.id)
            await content.share_status(user, item.id)
            await content.get_shared(shared.share_id)
            await content.import_content(user, [{"type": "link", "title": "Imported"}])
            await content.list_by_tag(user, "rust")

            go, _ = await tags.get_or_create(user, "go")
            await tags.attach(user, note.id, go.id)
            await tags.list_for_content(user, note.id)
            await tags.replace_for_content(user, note.id, ["rust", "systems"])
            await tags.detach(user, note.id, go.id)
            await tags.rename(user, go.id, "golang")
            await tags.top_with_content(user)
            await tags.delete(user, go.id)

            await search.search(user, "rust")
            await search.search(user, "rust", use_ai=True)

            todo = await todos.add(user, "Read")
            await todos.toggle(user, todo.id)
            await todos.list_by_user(user)
            await todos.delete(user, todo.id)

            await content.delete(user, note.id)
            await storage.users.get_by_id(user)

        assert deployment.rejected == []
        for endpoint, path, args in deployment.calls:
            kind, fields = SIGNATURES[path]
            assert endpoint == kind, path
            assert set(args) <= set(fields), path

    async def test_toggle_share_sends_only_declared_args(self, convex, deployment, settings, ai):
        async with convex.session() as storage:
            user = (await storage.users.create("dana@example.com", "Dana", "hash")).id
            service = ContentService(storage, settings, ai)
            item = (await service.create(user, "Rust Book", ContentType.LINK)).primary

            shared = await service.toggle_share(user, item.id)
            unshared = await service.toggle_share(user, item.id)

        calls = [args for _, path, args in deployment.calls if path == "content:toggleShareForUser"]
        assert [set(args) for args in calls] == [{"userId", "contentId"}] * 2
        # the deployment mints the share id from the document id and keeps it
        assert shared.is_shared is True
        assert shared.share_id == item.id
        assert unshared.share_id == item.id

    async def test_list_by_content_answers_id_and_name_only(self, convex, deployment):
        async with convex.session() as storage:
            user = (await storage.users.create("dana@example.com", "Dana", "hash")).id
            item = await storage.content.create(user, NewContent(title="Rust Book", type=ContentType.LINK))
            tag, _ = await storage.tags.get_or_create(user, "rust")
            await storage.content_tags.attach(user, item.id, tag.id)

            tags = await storage.tags.list_by_content(user, item.id)

        pairs = deployment.tags_list_by_content({"userId": user, "contentId": item.id})
        assert pairs == [{"id": tag.id, "name": "rust"}]
        assert tags == [tag]
        assert tags[0].user_id == user

    async def test_import_omits_absent_optionals(self, convex, deployment):
        async with convex.session() as storage:
            user = (await storage.users.create("dana@example.com", "Dana", "hash")).id
            count = await storage.content.create_many(
                user,
                [
                    NewContent(title="A", type=ContentType.LINK, url="https://a.example"),
                    NewContent(title="B", type=ContentType.TWEET),
                ],
            )

        assert count == 2
        (args,) = [args for _, path, args in deployment.calls if path == "content:importForUser"]
        assert args["items"] == [
            {"type": "link", "title": "A", "url": "https://a.example"},
            {"type": "tweet", "title": "B"},
        ]

    async def test_undeclared_argument_is_rejected(self, convex, deployment):
        async with convex.session() as storage:
            user = (await storage.users.create("dana@example.com", "Dana", "hash")).id
            item = await storage.content.create(user, NewContent(title="A", type=ContentType.LINK))

        with pytest.raises(ConvexFunctionError) as exc_info:
            await convex.client.mutation(
                "content:toggleShareForUser",
                {"userId": user, "contentId": item.id, "shareId": "abc"},
            )
        assert exc_info.value.is_argument_error
        assert deployment.rejected == [
            (
                "content:toggleShareForUser",
                "Object contains extra field `shareId` that is not in the validator.",
            )
        ]

    async def test_query_through_mutation_endpoint_fails(self, convex):
        with pytest.raises(ConvexFunctionError) as exc_info:
            await convex.client.mutation("tags:listByUser", {"userId": "u00000001"})
        assert not exc_info.value.is_argument_error


# ---------------------------------------------------------------------------
# Document mapper
# ---------------------------------------------------------------------------


class TestConvexMapper:
    def test_epoch_ms_to_iso(self):
        assert iso_from_epoch_ms(1735689600000) == "2025-01-01T00:00:00.000Z"
        assert iso_from_epoch_ms(1735689600123) == "2025-01-01T00:00:00.123Z"
        assert iso_from_epoch_ms(None) is None

    def test_content_document(self):
        record = to_content_record(
            {
                "id": "c1",
                "userId": "u1",
                "title": "T",
                "type": "youtube",
                "url": "https://youtu.be/x",
                "isFavourite": True,
                "createdAt": 1735689600000,
                "updatedAt": 1735689601000,
            }
        )
        assert record.user_id == "u1"
        assert record.type == ContentType.YOUTUBE
        assert record.is_favourite is True
        assert record.is_shared is False
        assert record.body is None
        assert record.created_at.tzinfo is not None
        assert (record.updated_at - record.created_at).total_seconds() == 1

    def test_todo_without_owner_uses_caller(self):
        record = to_todo_record(
            {"id": "d1", "title": "x", "createdAt": 0, "updatedAt": 0},
            "u9",
        )
        assert record.user_id == "u9"
        assert record.completed is False


# ---------------------------------------------------------------------------
# OpenAIAdapter
# ---------------------------------------------------------------------------


def fake_openai(embedding=None, completion="rust, go", error=None):
    async def create_embedding(**kwargs):
        if error is not None:
            raise error
        data = [] if embedding is None else [SimpleNamespace(embedding=embedding)]
        return SimpleNamespace(data=data)

    async def create_completion(**kwargs):
        if error is not None:
            raise error
        message = SimpleNamespace(content=completion)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def close():
        return None

    return SimpleNamespace(
        embeddings=SimpleNamespace(create=create_embedding),
        chat=SimpleNamespace(completions=SimpleNamespace(create=create_completion)),
        close=close,
    )


class TestOpenAIAdapter:
    async def test_embed_and_complete(self, settings):
        adapter = OpenAIAdapter(settings, client=fake_openai(embedding=[0.1, 0.2]))
        assert await adapter.embed("hello") == [0.1, 0.2]
        assert await adapter.complete("system", "user") == "rust, go"
        await adapter.close()

    async def test_missing_key(self, settings):
        with pytest.raises(UpstreamUnavailableError):
            await OpenAIAdapter(settings).embed("hello")

    async def test_empty_embedding_response(self, settings):
        with pytest.raises(UpstreamUnavailableError):
            await OpenAIAdapter(settings, client=fake_openai()).embed("hello")

    async def test_connection_error(self, settings):
        error = APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/embeddings"))
        adapter = OpenAIAdapter(settings, client=fake_openai(error=error))
        with pytest.raises(UpstreamUnavailableError):
            await adapter.embed("hello")
        with pytest.raises(UpstreamUnavailableError):
            await adapter.complete("system", "user")
