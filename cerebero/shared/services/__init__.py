"""
Business Logic Services

Services encapsulate business logic and coordinate between stores,
external services, and domain rules.

Service Pattern:
================
    Handler → Service → Storage port → SQL or Convex backend
                ↘ AI adapter

Services should:
- Contain business logic and validation
- Check ownership through user-scoped store calls
- Depend on the storage port only, never on a backend module
- NOT handle HTTP concerns (that's for handlers)

Available Services:
===================
- IdentityService: Session claims → user id
- AuthService: Signup, login, public profiles
- ContentService: Content CRUD, toggles, sharing, import
- TagService: Tag CRUD, content links, top tags, suggestions
- TodoService: Todo list
- SearchService: Text and semantic search
- EmbeddingService: Embedding generation and similarity ranking

Usage:
======
    from cerebero.shared.services import ContentService

    outcome = await ContentService(storage, settings, ai).create(user_id, ...)
"""

from cerebero.shared.services.auth_service import AuthService
from cerebero.shared.services.content_service import (
    ContentCreateOutcome,
    ContentService,
    ShareStatus,
    SideEffectResult,
)
from cerebero.shared.services.embedding_service import EmbeddingMatch, EmbeddingService
from cerebero.shared.services.identity_service import IdentityService, SessionClaims
from cerebero.shared.services.search_service import SearchHit, SearchService
from cerebero.shared.services.tag_service import TagService, TopTagSummary
from cerebero.shared.services.todo_service import TodoService

__all__ = [
    "AuthService",
    "ContentCreateOutcome",
    "ContentService",
    "ShareStatus",
    "SideEffectResult",
    "EmbeddingMatch",
    "EmbeddingService",
    "IdentityService",
    "SessionClaims",
    "SearchHit",
    "SearchService",
    "TagService",
    "TopTagSummary",
    "TodoService",
]
