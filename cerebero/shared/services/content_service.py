"""
Content Service

Business logic for saved content items.

Ownership:
==========
Every store call is scoped by the acting user, so an item owned by someone
else is reported exactly like a missing one: ``ContentNotFoundError`` (404).

Create side effects:
====================
Creating content writes the row first. Then it runs the best-effort steps
(embedding generation, one get-or-create + attach per tag). Each step
reports into ``ContentCreateOutcome.side_effects``; a failed step is logged
and never fails the create. Each step runs in its own savepoint, so a
failure undoes only that step's writes and the content row still commits.

Usage:
======
    from cerebero.shared.services.content_service import ContentService

    service = ContentService(storage, settings, ai=ai)
    outcome = await service.create(user_id, "Rust Book", ContentType.LINK,
                                   url="https://example.com/rust", tags=["systems"])
    outcome.primary.id
"""

import secrets
from dataclasses import dataclass, field
from typing import Any, Optional

from cerebero.config.settings import Settings
from cerebero.shared.adapters.openai_adapter import OpenAIAdapter
from cerebero.shared.core.exceptions import (
    ContentNotFoundError,
    TagNotFoundError,
    ValidationError,
)
from cerebero.shared.core.logging import get_logger
from cerebero.shared.models.enums import ContentType
from cerebero.shared.repositories.ports import Storage
from cerebero.shared.schemas.records import ContentPage, ContentRecord, NewContent, TagRecord
from cerebero.shared.services.embedding_service import EmbeddingService
from cerebero.shared.services.tag_service import TagService
from cerebero.shared.utils.text import normalize_tag_name


logger = get_logger(__name__)

SHARE_ID_BYTES = 16
DEFAULT_PAGE_LIMIT = 10


@dataclass
class SideEffectResult:
    """Result of one best-effort step run after the primary write."""

    name: str
    ok: bool
    error: Optional[str] = None


@dataclass
class ContentCreateOutcome:
    """The created item plus what happened to each side effect."""

    primary: ContentRecord
    tags: list[TagRecord] = field(default_factory=list)
    side_effects: list[SideEffectResult] = field(default_factory=list)

    @property
    def failures(self) -> list[SideEffectResult]:
        return [effect for effect in self.side_effects if not effect.ok]


@dataclass
class ShareStatus:
    is_shared: bool
    share_id: Optional[str] = None
    share_url: Optional[str] = None


class ContentService:
    """
    Service for content-related business logic.

    Handles:
    - Create (with embedding and tag side effects), edit, delete
    - Listing, favourites, lookup by tag
    - Favourite and share toggles, public share lookup
    - All-or-nothing batch import
    """

    def __init__(
        self,
        storage: Storage,
        settings: Settings,
        ai: Optional[OpenAIAdapter] = None,
    ) -> None:
        """
        Initialize ContentService.

        Args:
            storage: Stores for the current unit of work
            settings: Application settings (share URL base)
            ai: AI adapter; without it new content is not embedded
        """
        self.storage = storage
        self.settings = settings
        self.tags = TagService(storage, ai)
        self.embeddings = EmbeddingService(storage.embeddings, ai) if ai is not None else None

    @staticmethod
    def _validated(title: Optional[str], type: Any, url: Optional[str], body: Optional[str]) -> NewContent:
        """
        Raises:
            ValidationError: If title is blank or type is not a known content type
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required", details={"field": "title"})
        try:
            content_type = ContentType(type)
        except ValueError:
            raise ValidationError(
                "Invalid content type",
                details={"field": "type", "allowed": [t.value for t in ContentType]},
            )
        return NewContent(title=title, type=content_type, url=url or None, body=body or None)

    async def _get_owned(self, user_id: str, content_id: str) -> ContentRecord:
        content = await self.storage.content.get_by_id(user_id, content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        return content

    # ═══════════════════════════════════════════════════════════════════════════
    # CREATE / EDIT / DELETE
    # ═══════════════════════════════════════════════════════════════════════════

    async def create(
        self,
        user_id: str,
        title: str,
        type: ContentType,
        url: Optional[str] = None,
        body: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> ContentCreateOutcome:
        """
        Save a new content item.

        Flow:
        1. Validate and insert the row (failures here fail the request)
        2. Embed title + payload and store the vector (best effort)
        3. Get-or-create and attach each tag (best effort, duplicates ignored)
        """
        item = self._validated(title, type, url, body)
        content = await self.storage.content.create(user_id, item)
        logger.info("content_created", user_id=user_id, content_id=content.id, type=content.type.value)

        outcome = ContentCreateOutcome(primary=content)
        outcome.side_effects.append(await self._embed(user_id, content))

        seen: set[str] = set()
        for name in tags or []:
            normalized = normalize_tag_name(name or "")
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            outcome.side_effects.append(await self._attach_tag(user_id, content, normalized, outcome))

        if outcome.failures:
            logger.warning(
                "content_create_side_effects_failed",
                user_id=user_id,
                content_id=content.id,
                failed=[effect.name for effect in outcome.failures],
            )
        return outcome

    async def _embed(self, user_id: str, content: ContentRecord) -> SideEffectResult:
        if self.embeddings is None:
            return SideEffectResult(name="embedding", ok=False, error="AI adapter not configured")
        try:
            async with self.storage.savepoint():
                stored = await self.embeddings.index_content(user_id, content)
        except Exception as e:
            logger.error(
                "content_embedding_failed",
                user_id=user_id,
                content_id=content.id,
                error=str(e),
                exc_info=True,
            )
            return SideEffectResult(name="embedding", ok=False, error=str(e))
        if not stored:
            return SideEffectResult(name="embedding", ok=False, error="Content no longer exists")
        return SideEffectResult(name="embedding", ok=True)

    async def _attach_tag(
        self,
        user_id: str,
        content: ContentRecord,
        name: str,
        outcome: ContentCreateOutcome,
    ) -> SideEffectResult:
        effect_name = f"tag:{name}"
        try:
            async with self.storage.savepoint():
                tag, _ = await self.tags.get_or_create(user_id, name)
                # False means the link was already there; that is fine on create
                await self.storage.content_tags.attach(user_id, content.id, tag.id)
        except Exception as e:
            logger.error(
                "content_tag_attach_failed",
                user_id=user_id,
                content_id=content.id,
                tag=name,
                error=str(e),
                exc_info=True,
            )
            return SideEffectResult(name=effect_name, ok=False, error=str(e))
        outcome.tags.append(tag)
        return SideEffectResult(name=effect_name, ok=True)

    async def edit(
        self,
        user_id: str,
        content_id: str,
        title: str,
        type: ContentType,
        url: Optional[str] = None,
        body: Optional[str] = None,
    ) -> ContentRecord:
        """
        Overwrite title, type, url and body; bumps ``updated_at``.

        Raises:
            ValidationError: If title/type are invalid
            ContentNotFoundError: If the item is absent or not owned
        """
        item = self._validated(title, type, url, body)
        content = await self.storage.content.update(user_id, content_id, item)
        if content is None:
            raise ContentNotFoundError(content_id)
        logger.info("content_updated", user_id=user_id, content_id=content_id)
        return content

    async def delete(self, user_id: str, content_id: str) -> None:
        """Delete the item with its tag links and embedding."""
        if not await self.storage.content.delete(user_id, content_id):
            raise ContentNotFoundError(content_id)
        logger.info("content_deleted", user_id=user_id, content_id=content_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # READS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get(self, user_id: str, content_id: str) -> ContentRecord:
        return await self._get_owned(user_id, content_id)

    async def list_by_user(self, user_id: str) -> list[ContentRecord]:
        """All owned content, most recently updated first. Empty list if none."""
        return await self.storage.content.list_by_user(user_id)

    async def list_favourites(self, user_id: str) -> list[ContentRecord]:
        return await self.storage.content.list_favourites_by_user(user_id)

    async def list_by_tag(
        self,
        user_id: str,
        tag_name: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> tuple[TagRecord, ContentPage]:
        """
        One page of the content carrying a tag, looked up by name.

        Raises:
            ValidationError: If limit < 1 or offset < 0
            TagNotFoundError: If the user has no tag with this name
        """
        if limit < 1:
            raise ValidationError("limit must be a positive integer", details={"field": "limit"})
        if offset < 0:
            raise ValidationError("offset must not be negative", details={"field": "offset"})

        name = normalize_tag_name(tag_name or "")
        tag = await self.storage.tags.get_by_name(user_id, name) if name else None
        if tag is None:
            raise TagNotFoundError(details={"name": tag_name})

        page = await self.storage.content.list_by_tag(user_id, tag.id, limit=limit, offset=offset)
        return tag, page

    # ═══════════════════════════════════════════════════════════════════════════
    # TOGGLES AND SHARING
    # ═══════════════════════════════════════════════════════════════════════════

    async def toggle_favourite(self, user_id: str, content_id: str) -> ContentRecord:
        content = await self.storage.content.toggle_favourite(user_id, content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        logger.info(
            "content_favourite_toggled",
            user_id=user_id,
            content_id=content_id,
            is_favourite=content.is_favourite,
        )
        return content

    async def toggle_share(self, user_id: str, content_id: str) -> ContentRecord:
        """
        Flip the shared flag.

        The first share mints an unguessable share id; it is kept on unshare
        so re-sharing restores the same link. Lookup requires the flag.
        """
        content = await self.storage.content.toggle_share(
            user_id,
            content_id,
            new_share_id=secrets.token_urlsafe(SHARE_ID_BYTES),
        )
        if content is None:
            raise ContentNotFoundError(content_id)
        logger.info(
            "content_share_toggled",
            user_id=user_id,
            content_id=content_id,
            is_shared=content.is_shared,
        )
        return content

    def share_url(self, content: ContentRecord) -> Optional[str]:
        if not content.is_shared or not content.share_id:
            return None
        return f"{self.settings.SHARED_BASE_URL.rstrip('/')}/shared/{content.share_id}"

    async def share_status(self, user_id: str, content_id: str) -> ShareStatus:
        content = await self._get_owned(user_id, content_id)
        if not content.is_shared:
            return ShareStatus(is_shared=False)
        return ShareStatus(
            is_shared=True,
            share_id=content.share_id,
            share_url=self.share_url(content),
        )

    async def get_shared(self, share_id: str) -> ContentRecord:
        """
        Public lookup by share id. Unshared items are not found even when
        they still carry the id.
        """
        content = await self.storage.content.get_by_share_id(share_id) if share_id else None
        if content is None:
            raise ContentNotFoundError()
        return content

    # ═══════════════════════════════════════════════════════════════════════════
    # IMPORT
    # ═══════════════════════════════════════════════════════════════════════════

    async def import_content(self, user_id: str, items: list[dict[str, Any]]) -> int:
        """
        Insert a batch of items, all or none.

        Every item is validated before anything is written; the first bad
        item rejects the batch with its index and field.

        Returns:
            Number of items inserted
        """
        if not items:
            raise ValidationError("No content to import", details={"field": "content"})

        batch: list[NewContent] = []
        for index, raw in enumerate(items):
            if not (raw.get("type") or "").strip():
                raise ValidationError(
                    f"Item {index} is missing a type",
                    details={"index": index, "field": "type"},
                )
            if not (raw.get("title") or "").strip():
                raise ValidationError(
                    f"Item {index} is missing a title",
                    details={"index": index, "field": "title"},
                )
            try:
                batch.append(
                    self._validated(raw.get("title"), raw["type"].strip().lower(), raw.get("url"), raw.get("body"))
                )
            except ValidationError as e:
                raise ValidationError(
                    f"Item {index}: {e.message}",
                    details={"index": index, **e.details},
                ) from e

        count = await self.storage.content.create_many(user_id, batch)
        logger.info("content_imported", user_id=user_id, count=count)
        return count
