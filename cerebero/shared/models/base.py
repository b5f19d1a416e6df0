"""
Base Model Classes

Declarative base and the timestamp mixin shared by every Cerebero table.

Model Hierarchy:
================
    Base                    ← SQLAlchemy declarative base
       │
       └── TimestampMixin   ← Automatic created_at/updated_at

Portability:
============
Models use the generic ``Uuid`` and ``JSON`` types so the same metadata runs
on PostgreSQL (production, asyncpg) and SQLite (tests, aiosqlite).

Usage:
======
    from cerebero.shared.models.base import Base, TimestampMixin

    class Todo(Base, TimestampMixin):
        __tablename__ = "todos"
        id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current time, used for all timestamp defaults."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    JSON-typed annotations map to the generic ``JSON`` type, which renders as
    ``JSON`` on PostgreSQL and as text on SQLite.
    """

    type_annotation_map = {
        dict[str, Any]: JSON,
        list[float]: JSON,
    }


class TimestampMixin:
    """
    Mixin that adds timestamp tracking to models.

    - created_at: set when the record is first inserted
    - updated_at: set on insert, bumped by SQLAlchemy on every UPDATE

    Both carry a Python-side default so values keep microsecond precision
    on every dialect (ordering by ``updated_at`` depends on it), and a
    server default for rows written outside the ORM.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utcnow,
        nullable=False,
    )
