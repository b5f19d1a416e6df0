"""
Document-Store Storage Backend

Convex implementation of ``StorageBackend``. Each store method calls one or
more of the deployment's public queries and mutations and maps the returned
documents through ``convex_mapper``; ownership scoping and cascades run
inside the Convex functions, keyed by the indexes declared in the deployment
schema (``by_user_updated``, ``by_user_favourite``, ``by_share_id``,
``by_user_name``, ``by_user_content_tag``, ...).

Function Contract:
==================
    users:    getPublicById {userId: Id<users>}
              getByEmail {email}
              createCredentialsUser {email, name, passwordHash}
    content:  createForUser {userId, type, title, url?, body?, isShared?, isFavourite?}
              importForUser {userId, items: [{type, title, url?, body?}]}
              getByIdForUser / toggleFavouriteForUser / toggleShareForUser /
              deleteForUser {userId, contentId}
              listByUser / listFavouritesByUser {userId}
              updateForUser {userId, contentId, title, type, url?, body?}
              getSharedByShareId {shareId}
              searchByText {userId, q, limit}
              listEmbeddingsWithContentByUser {userId}
              upsertEmbeddingForContent {userId, contentId, embedding}
    tags:     listByUser {userId}
              createForUser {userId, name}
              updateForUser {userId, tagId: Id<tags>, name}
              deleteForUser {userId, tagId: Id<tags>}
              attachToContent / detachFromContent {userId, contentId, tagId: Id<tags>}
              listByContent {userId, contentId}              → [{id, name}]
              getTopWithContent {userId, tagLimit, contentLimit}
    todos:    listByUser / createForUser {userId[, title]}
              deleteForUser / toggleForUser {userId, todoId: Id<todos>}

Convex rejects any argument its validator does not declare, so calls send
exactly these fields and omit absent optional ones.

Derived lookups:
================
The deployment has no single-tag or per-tag content queries. Tag lookups by
id or name filter ``tags:listByUser``; tag links and content-by-tag come
from ``tags:getTopWithContent`` asked for every tag and every link.

Transactions:
=============
There is no client-side unit of work: every Convex mutation is its own
transaction. Multi-step operations that must be atomic (cascade delete,
batch import) are therefore single mutations on the Convex side.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, TypeVar

import httpx

from cerebero.config.settings import Settings
from cerebero.shared.adapters.convex_client import ConvexClient, ConvexFunctionError
from cerebero.shared.core.exceptions import ConflictError, StorageUnavailableError
from cerebero.shared.core.logging import get_logger
from cerebero.shared.backends.convex_mapper import (
    to_content_record,
    to_content_tag_record,
    to_tag_record,
    to_todo_record,
    to_user_record,
)
from cerebero.shared.repositories.ports import Storage
from cerebero.shared.schemas.records import (
    ContentPage,
    ContentRecord,
    ContentTagRecord,
    EmbeddingCandidate,
    NewContent,
    TagRecord,
    TodoRecord,
    UserRecord,
)


logger = get_logger(__name__)

T = TypeVar("T")

# Sentinel for "this call named a record that cannot exist"
_MISSING: Any = object()

# tags:getTopWithContent slices to these; large enough to mean "everything"
ALL_TAGS = 1_000_000
ALL_LINKS = 1_000_000


class ConvexStore:
    """Shared call helpers for the Convex stores."""

    def __init__(self, client: ConvexClient) -> None:
        self.client = client

    async def _call(self, endpoint: str, path: str, args: dict[str, Any]) -> Any:
        try:
            if endpoint == "query":
                return await self.client.query(path, args)
            return await self.client.mutation(path, args)
        except ConvexFunctionError as e:
            if e.is_argument_error:
                logger.debug("convex_argument_rejected", path=path, error=e.message)
                return _MISSING
            logger.error("convex_function_failed", path=path, error=e.message)
            raise StorageUnavailableError() from e

    async def _query(self, path: str, args: dict[str, Any], missing: T) -> Any:
        value = await self._call("query", path, args)
        return missing if value is _MISSING else value

    async def _mutation(self, path: str, args: dict[str, Any], missing: T) -> Any:
        value = await self._call("mutation", path, args)
        return missing if value is _MISSING else value

    async def _owned_tags(self, user_id: str) -> list[TagRecord]:
        """Every tag the user owns, ordered by name."""
        docs = await self._query("tags:listByUser", {"userId": user_id}, [])
        return [to_tag_record(doc) for doc in docs or []]

    async def _tag_usage(self, user_id: str) -> list[dict[str, Any]]:
        """
        Every owned tag with all of its links.

        Each entry is ``{tagId, tagName, usageCount, content}``; ``content``
        holds ``{id, created_at}`` per link, most recently attached first.
        """
        entries = await self._query(
            "tags:getTopWithContent",
            {"userId": user_id, "tagLimit": ALL_TAGS, "contentLimit": ALL_LINKS},
            [],
        )
        return entries or []


# ═══════════════════════════════════════════════════════════════════════════════
# USERS
# ═══════════════════════════════════════════════════════════════════════════════


class ConvexUserStore(ConvexStore):
    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        doc = await self._query("users:getPublicById", {"userId": user_id}, None)
        return to_user_record(doc) if doc else None

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        doc = await self._query("users:getByEmail", {"email": email.strip().lower()}, None)
        return to_user_record(doc) if doc else None

    async def create(self, email: str, name: str, password_hash: str) -> UserRecord:
        try:
            doc = await self.client.mutation(
                "users:createCredentialsUser",
                {"email": email, "name": name, "passwordHash": password_hash},
            )
        except ConvexFunctionError as e:
            if "EMAIL_EXISTS" in e.message:
                raise ConflictError("Email already registered") from e
            logger.error("convex_function_failed", path=e.path, error=e.message)
            raise StorageUnavailableError() from e
        return to_user_record(doc)


# ═══════════════════════════════════════════════════════════════════════════════
# CONTENT
# ═══════════════════════════════════════════════════════════════════════════════


def _content_args(item: NewContent) -> dict[str, Any]:
    # Absent optionals are left out; v.optional() rejects null, also inside import items
    fields = {
        "type": item.type.value,
        "title": item.title,
        "url": item.url,
        "body": item.body,
    }
    return {key: value for key, value in fields.items() if value is not None}


class ConvexContentStore(ConvexStore):
    async def create(self, user_id: str, item: NewContent) -> ContentRecord:
        doc = await self._mutation(
            "content:createForUser", {"userId": user_id, **_content_args(item)}, None
        )
        if doc is None:
            raise StorageUnavailableError()
        return to_content_record(doc)

    async def create_many(self, user_id: str, items: list[NewContent]) -> int:
        result = await self._mutation(
            "content:importForUser",
            {"userId": user_id, "items": [_content_args(item) for item in items]},
            None,
        )
        if result is None:
            raise StorageUnavailableError()
        return int(result.get("count", len(items)))

    async def get_by_id(self, user_id: str, content_id: str) -> Optional[ContentRecord]:
        doc = await self._query(
            "content:getByIdForUser", {"userId": user_id, "contentId": content_id}, None
        )
        return to_content_record(doc) if doc else None

    async def list_by_user(self, user_id: str) -> list[ContentRecord]:
        docs = await self._query("content:listByUser", {"userId": user_id}, [])
        return [to_content_record(doc) for doc in docs or []]

    async def list_favourites_by_user(self, user_id: str) -> list[ContentRecord]:
        docs = await self._query("content:listFavouritesByUser", {"userId": user_id}, [])
        return [to_content_record(doc) for doc in docs or []]

    async def update(
        self, user_id: str, content_id: str, item: NewContent
    ) -> Optional[ContentRecord]:
        result = await self._mutation(
            "content:updateForUser",
            {"userId": user_id, "contentId": content_id, **_content_args(item)},
            None,
        )
        if not result or result.get("status") != "updated":
            return None
        return to_content_record(result["content"])

    async def toggle_favourite(self, user_id: str, content_id: str) -> Optional[ContentRecord]:
        doc = await self._mutation(
            "content:toggleFavouriteForUser", {"userId": user_id, "contentId": content_id}, None
        )
        return to_content_record(doc) if doc else None

    async def toggle_share(
        self, user_id: str, content_id: str, new_share_id: str
    ) -> Optional[ContentRecord]:
        """
        The deployment mints the share id itself (the document id) on first
        share and keeps it afterwards, so ``new_share_id`` is not sent.
        """
        doc = await self._mutation(
            "content:toggleShareForUser", {"userId": user_id, "contentId": content_id}, None
        )
        return to_content_record(doc) if doc else None

    async def get_by_share_id(self, share_id: str) -> Optional[ContentRecord]:
        doc = await self._query("content:getSharedByShareId", {"shareId": share_id}, None)
        if not doc or not doc.get("isShared"):
            return None
        return to_content_record(doc)

    async def delete(self, user_id: str, content_id: str) -> bool:
        result = await self._mutation(
            "content:deleteForUser", {"userId": user_id, "contentId": content_id}, None
        )
        return bool(result and result.get("deleted"))

    async def search_text(self, user_id: str, query: str, limit: int) -> list[ContentRecord]:
        docs = await self._query(
            "content:searchByText", {"userId": user_id, "q": query, "limit": limit}, []
        )
        return [to_content_record(doc) for doc in docs or []]

    async def list_by_tag(
        self, user_id: str, tag_id: str, limit: int, offset: int
    ) -> ContentPage:
        """
        Content linked to ``tag_id``, most recently updated first.

        Links come from ``tags:getTopWithContent``; the documents themselves
        from ``content:listByUser``, which is already in page order.
        """
        usage = next(
            (entry for entry in await self._tag_usage(user_id) if entry.get("tagId") == tag_id),
            None,
        )
        if usage is None:
            return ContentPage(items=[], total=0)

        linked = {link["id"] for link in usage.get("content") or []}
        items = [item for item in await self.list_by_user(user_id) if item.id in linked]
        return ContentPage(items=items[offset : offset + limit], total=len(items))


# ═══════════════════════════════════════════════════════════════════════════════
# TAGS
# ═══════════════════════════════════════════════════════════════════════════════


class ConvexTagStore(ConvexStore):
    async def get_or_create(self, user_id: str, name: str) -> tuple[TagRecord, bool]:
        result = await self._mutation(
            "tags:createForUser", {"userId": user_id, "name": name}, None
        )
        if not result or not result.get("tag"):
            raise StorageUnavailableError()
        return to_tag_record(result["tag"]), result.get("status") == "created"

    async def get_by_id(self, user_id: str, tag_id: str) -> Optional[TagRecord]:
        return next((tag for tag in await self._owned_tags(user_id) if tag.id == tag_id), None)

    async def get_by_name(self, user_id: str, name: str) -> Optional[TagRecord]:
        return next((tag for tag in await self._owned_tags(user_id) if tag.name == name), None)

    async def list_by_user(self, user_id: str) -> list[TagRecord]:
        return await self._owned_tags(user_id)

    async def list_by_content(self, user_id: str, content_id: str) -> list[TagRecord]:
        """
        ``tags:listByContent`` returns only ``{id, name}`` pairs; the full
        records come from the owned tag list, which is already name-ordered.
        """
        pairs = await self._query(
            "tags:listByContent", {"userId": user_id, "contentId": content_id}, []
        )
        linked = {pair["id"] for pair in pairs or [] if pair}
        if not linked:
            return []
        return [tag for tag in await self._owned_tags(user_id) if tag.id in linked]

    async def rename(self, user_id: str, tag_id: str, name: str) -> Optional[TagRecord]:
        result = await self._mutation(
            "tags:updateForUser", {"userId": user_id, "tagId": tag_id, "name": name}, None
        )
        status = (result or {}).get("status", "not_found")
        if status == "conflict":
            raise ConflictError("A tag with this name already exists", details={"name": name})
        if status != "updated":
            return None
        return to_tag_record(result["tag"])

    async def delete(self, user_id: str, tag_id: str) -> bool:
        result = await self._mutation(
            "tags:deleteForUser", {"userId": user_id, "tagId": tag_id}, None
        )
        return (result or {}).get("status") == "deleted"


class ConvexContentTagStore(ConvexStore):
    async def attach(self, user_id: str, content_id: str, tag_id: str) -> bool:
        result = await self._mutation(
            "tags:attachToContent",
            {"userId": user_id, "contentId": content_id, "tagId": tag_id},
            None,
        )
        status = (result or {}).get("status")
        if status in ("tag_not_found", "forbidden"):
            logger.warning("tag_attach_rejected", user_id=user_id, tag_id=tag_id, status=status)
        return status == "attached"

    async def detach(self, user_id: str, content_id: str, tag_id: str) -> bool:
        result = await self._mutation(
            "tags:detachFromContent",
            {"userId": user_id, "contentId": content_id, "tagId": tag_id},
            None,
        )
        return (result or {}).get("status") == "detached"

    async def list_by_user(self, user_id: str) -> list[ContentTagRecord]:
        records = [
            to_content_tag_record(user_id, entry["tagId"], link)
            for entry in await self._tag_usage(user_id)
            for link in entry.get("content") or []
        ]
        return sorted(records, key=lambda relation: relation.created_at, reverse=True)


# ═══════════════════════════════════════════════════════════════════════════════
# EMBEDDINGS
# ═══════════════════════════════════════════════════════════════════════════════


class ConvexEmbeddingStore(ConvexStore):
    async def upsert(self, user_id: str, content_id: str, embedding: list[float]) -> bool:
        result = await self._mutation(
            "content:upsertEmbeddingForContent",
            {"userId": user_id, "contentId": content_id, "embedding": list(embedding)},
            None,
        )
        return (result or {}).get("status") in ("created", "updated")

    async def list_by_user(self, user_id: str) -> list[EmbeddingCandidate]:
        items = await self._query(
            "content:listEmbeddingsWithContentByUser", {"userId": user_id}, []
        )
        return [
            EmbeddingCandidate(
                content=to_content_record(item["content"]),
                embedding=item["embedding"],
            )
            for item in items or []
            if item and item.get("content")
        ]


# ═══════════════════════════════════════════════════════════════════════════════
# TODOS
# ═══════════════════════════════════════════════════════════════════════════════


class ConvexTodoStore(ConvexStore):
    async def list_by_user(self, user_id: str) -> list[TodoRecord]:
        docs = await self._query("todos:listByUser", {"userId": user_id}, [])
        return [to_todo_record(doc, user_id) for doc in docs or []]

    async def create(self, user_id: str, title: str) -> TodoRecord:
        doc = await self._mutation("todos:createForUser", {"userId": user_id, "title": title}, None)
        if doc is None:
            raise StorageUnavailableError()
        return to_todo_record(doc, user_id)

    async def delete(self, user_id: str, todo_id: str) -> bool:
        result = await self._mutation(
            "todos:deleteForUser", {"userId": user_id, "todoId": todo_id}, None
        )
        return bool(result and result.get("deleted"))

    async def toggle(self, user_id: str, todo_id: str) -> Optional[TodoRecord]:
        doc = await self._mutation(
            "todos:toggleForUser", {"userId": user_id, "todoId": todo_id}, None
        )
        return to_todo_record(doc, user_id) if doc else None


# ═══════════════════════════════════════════════════════════════════════════════
# BACKEND
# ═══════════════════════════════════════════════════════════════════════════════


class ConvexBackend:
    """
    Document-store storage backend.

    Args:
        settings: Application settings (CONVEX_* keys, STORAGE_TIMEOUT_SECONDS)
        transport: Optional httpx transport; tests inject an in-process deployment
    """

    name = "convex"

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.client = ConvexClient(
            settings.convex_api_url,
            settings.CONVEX_DEPLOY_KEY,
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
            transport=transport,
        )
        self._storage = Storage(
            users=ConvexUserStore(self.client),
            content=ConvexContentStore(self.client),
            tags=ConvexTagStore(self.client),
            content_tags=ConvexContentTagStore(self.client),
            embeddings=ConvexEmbeddingStore(self.client),
            todos=ConvexTodoStore(self.client),
        )

    async def startup(self) -> None:
        logger.info("storage_ready", backend=self.name, url=self.settings.convex_api_url)

    async def shutdown(self) -> None:
        await self.client.close()
        logger.info("storage_closed", backend=self.name)

    async def ping(self) -> bool:
        try:
            await self.client.query("users:getByEmail", {"email": ""})
            return True
        except (StorageUnavailableError, ConvexFunctionError) as e:
            logger.warning("storage_ping_failed", backend=self.name, error=str(e))
            return False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Storage]:
        yield self._storage
