"""
Database Module

Engine and session factories for the relational storage backend.

Architecture Overview:
======================
    SqlBackend.session()
        │
        │  one AsyncSession per request, commit on success / rollback on error
        ▼
    Repositories (cerebero.shared.repositories)
        │
        ▼
    PostgreSQL (asyncpg)  or  SQLite (aiosqlite)
"""

from cerebero.shared.db.session import (
    create_engine,
    create_session_factory,
    is_sqlite_url,
)

__all__ = [
    "create_engine",
    "create_session_factory",
    "is_sqlite_url",
]
