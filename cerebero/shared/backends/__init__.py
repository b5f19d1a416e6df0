"""
Storage Backends

Two interchangeable implementations of the storage port:

    STORAGE_BACKEND=sql     → SqlBackend     (SQLAlchemy; PostgreSQL or SQLite)
    STORAGE_BACKEND=convex  → ConvexBackend  (Convex function API over httpx)

Usage:
======
    backend = build_backend(settings)
    await backend.startup()
    async with backend.session() as storage:
        items = await storage.content.list_by_user(user_id)
"""

from cerebero.config.settings import Settings
from cerebero.shared.backends.convex import ConvexBackend
from cerebero.shared.backends.sql import SqlBackend
from cerebero.shared.repositories.ports import StorageBackend


def build_backend(settings: Settings) -> StorageBackend:
    """Construct the backend named by ``settings.STORAGE_BACKEND``."""
    if settings.STORAGE_BACKEND == "convex":
        return ConvexBackend(settings)
    return SqlBackend(settings)


__all__ = [
    "build_backend",
    "ConvexBackend",
    "SqlBackend",
]
