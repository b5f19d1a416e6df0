"""
Storage Port

The one interface services depend on. Each storage backend (relational via
SQLAlchemy, document store via Convex) implements these protocols; services
never import a backend module.

Architecture:
=============
    Service ──► Storage (bundle of stores)
                   ├── users:        UserStore
                   ├── content:      ContentStore
                   ├── tags:         TagStore
                   ├── content_tags: ContentTagStore
                   ├── embeddings:   EmbeddingStore
                   └── todos:        TodoStore

    StorageBackend.session() ──► Storage   (one per request / unit of work)

Rules every implementation follows:
===================================
- Every read and write is scoped by the acting ``user_id``. A record owned by
  another user is reported exactly like an absent one.
- "Not found" is a return value (``None`` / ``False``), never an exception.
- Backend failures raise ``StorageUnavailableError``.
- Uniqueness violations raise ``ConflictError``, except where a method
  documents an idempotent outcome instead.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncContextManager, AsyncIterator, Callable, Optional, Protocol

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


class UserStore(Protocol):
    async def get_by_id(self, user_id: str) -> Optional[UserRecord]: ...

    async def get_by_email(self, email: str) -> Optional[UserRecord]: ...

    async def create(self, email: str, name: str, password_hash: str) -> UserRecord:
        """Insert a credentials user. Raises ``ConflictError`` if the email is taken."""
        ...


class ContentStore(Protocol):
    async def create(self, user_id: str, item: NewContent) -> ContentRecord: ...

    async def create_many(self, user_id: str, items: list[NewContent]) -> int:
        """Insert every item with one shared timestamp, all or none."""
        ...

    async def get_by_id(self, user_id: str, content_id: str) -> Optional[ContentRecord]: ...

    async def list_by_user(self, user_id: str) -> list[ContentRecord]:
        """All owned content, most recently updated first."""
        ...

    async def list_favourites_by_user(self, user_id: str) -> list[ContentRecord]: ...

    async def update(
        self, user_id: str, content_id: str, item: NewContent
    ) -> Optional[ContentRecord]: ...

    async def toggle_favourite(self, user_id: str, content_id: str) -> Optional[ContentRecord]: ...

    async def toggle_share(
        self, user_id: str, content_id: str, new_share_id: str
    ) -> Optional[ContentRecord]:
        """
        Flip ``is_shared``. ``new_share_id`` is stored only if the item has
        never had a share id; an existing one is kept across unshare/reshare.
        """
        ...

    async def get_by_share_id(self, share_id: str) -> Optional[ContentRecord]:
        """Public lookup; returns the item only while ``is_shared`` is true."""
        ...

    async def delete(self, user_id: str, content_id: str) -> bool:
        """Remove tag links, then the embedding, then the content row."""
        ...

    async def search_text(self, user_id: str, query: str, limit: int) -> list[ContentRecord]:
        """Case-insensitive substring match on title or body, newest first."""
        ...

    async def list_by_tag(
        self, user_id: str, tag_id: str, limit: int, offset: int
    ) -> ContentPage: ...


class TagStore(Protocol):
    async def get_or_create(self, user_id: str, name: str) -> tuple[TagRecord, bool]:
        """Return ``(tag, created)``. ``name`` must already be normalised."""
        ...

    async def get_by_id(self, user_id: str, tag_id: str) -> Optional[TagRecord]: ...

    async def get_by_name(self, user_id: str, name: str) -> Optional[TagRecord]: ...

    async def list_by_user(self, user_id: str) -> list[TagRecord]:
        """All owned tags ordered by name."""
        ...

    async def list_by_content(self, user_id: str, content_id: str) -> list[TagRecord]: ...

    async def rename(self, user_id: str, tag_id: str, name: str) -> Optional[TagRecord]:
        """Raises ``ConflictError`` if another owned tag already has ``name``."""
        ...

    async def delete(self, user_id: str, tag_id: str) -> bool:
        """Remove every link to the tag, then the tag."""
        ...


class ContentTagStore(Protocol):
    async def attach(self, user_id: str, content_id: str, tag_id: str) -> bool:
        """Link a tag to content. Returns False if the link already existed."""
        ...

    async def detach(self, user_id: str, content_id: str, tag_id: str) -> bool:
        """Returns False if there was no link to remove."""
        ...

    async def list_by_user(self, user_id: str) -> list[ContentTagRecord]:
        """Every link the user owns, newest first."""
        ...


class EmbeddingStore(Protocol):
    async def upsert(self, user_id: str, content_id: str, embedding: list[float]) -> bool:
        """Store or replace the vector. Returns False if the content is gone."""
        ...

    async def list_by_user(self, user_id: str) -> list[EmbeddingCandidate]: ...


class TodoStore(Protocol):
    async def list_by_user(self, user_id: str) -> list[TodoRecord]:
        """Owned todos, oldest first."""
        ...

    async def create(self, user_id: str, title: str) -> TodoRecord: ...

    async def delete(self, user_id: str, todo_id: str) -> bool: ...

    async def toggle(self, user_id: str, todo_id: str) -> Optional[TodoRecord]: ...


@asynccontextmanager
async def no_savepoint() -> AsyncIterator[None]:
    yield


@dataclass
class Storage:
    """
    The stores of one unit of work.

    ``savepoint()`` opens a nested block inside the unit of work: if the
    block raises, only its writes are undone and the outer transaction stays
    usable. Backends without client-side transactions leave it a no-op.
    """

    users: UserStore
    content: ContentStore
    tags: TagStore
    content_tags: ContentTagStore
    embeddings: EmbeddingStore
    todos: TodoStore
    savepoint: Callable[[], AsyncContextManager[Any]] = no_savepoint


class StorageBackend(Protocol):
    name: str

    async def startup(self) -> None: ...

    async def shutdown(self) -> None: ...

    async def ping(self) -> bool:
        """Cheap liveness check used by the readiness endpoint."""
        ...

    def session(self) -> AsyncContextManager[Storage]:
        """
        Open a unit of work.

        The SQL backend commits when the block exits cleanly and rolls back
        when it raises; the Convex backend has no client-side transaction.
        """
        ...
