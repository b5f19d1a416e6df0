"""
Cerebero SQLAlchemy Models

Tables used by the relational storage backend.

Model Hierarchy:
================
    User
       ├── Content
       │      ├── ContentTag ──── Tag
       │      └── ContentEmbedding
       ├── Tag
       └── Todo

Every table except ``users`` carries ``user_id``; all queries filter on it.

Usage:
======
    from cerebero.shared.models import Base, Content, Tag

    Base.metadata.create_all(sync_conn)
"""

from cerebero.shared.models.base import Base, TimestampMixin
from cerebero.shared.models.enums import AuthProvider, ContentType, SearchResultType
from cerebero.shared.models.user import User
from cerebero.shared.models.content import Content
from cerebero.shared.models.tag import Tag
from cerebero.shared.models.content_tag import ContentTag
from cerebero.shared.models.content_embedding import ContentEmbedding
from cerebero.shared.models.todo import Todo

__all__ = [
    # Base classes and mixins
    "Base",
    "TimestampMixin",
    # Enums
    "AuthProvider",
    "ContentType",
    "SearchResultType",
    # Models
    "User",
    "Content",
    "Tag",
    "ContentTag",
    "ContentEmbedding",
    "Todo",
]
