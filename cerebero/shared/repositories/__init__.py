"""
Repositories

The storage port (``ports``) and its SQL implementation.

Repository Hierarchy:
=====================
    BaseRepository[ModelType, RecordType]   ← User-scoped CRUD helpers
         │
         ├── UserRepository                 ← UserStore
         ├── ContentRepository              ← ContentStore
         ├── TagRepository                  ← TagStore
         ├── ContentTagRepository           ← ContentTagStore
         ├── EmbeddingRepository            ← EmbeddingStore
         └── TodoRepository                 ← TodoStore

The document-store implementation of the same port lives in
``cerebero.shared.backends.convex``.

Usage Example:
==============
    async with backend.session() as storage:
        tag, created = await storage.tags.get_or_create(user_id, "reading")
"""

from cerebero.shared.repositories.base import BaseRepository, storage_operation
from cerebero.shared.repositories.ports import Storage, StorageBackend
from cerebero.shared.repositories.user_repository import UserRepository
from cerebero.shared.repositories.content_repository import ContentRepository
from cerebero.shared.repositories.tag_repository import TagRepository
from cerebero.shared.repositories.content_tag_repository import ContentTagRepository
from cerebero.shared.repositories.embedding_repository import EmbeddingRepository
from cerebero.shared.repositories.todo_repository import TodoRepository

__all__ = [
    "BaseRepository",
    "storage_operation",
    "Storage",
    "StorageBackend",
    "UserRepository",
    "ContentRepository",
    "TagRepository",
    "ContentTagRepository",
    "EmbeddingRepository",
    "TodoRepository",
]
