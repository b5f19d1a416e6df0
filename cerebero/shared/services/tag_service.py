"""
Tag Service

Business logic for user-scoped tags and their links to content.

Tag names:
==========
Names are compared and stored trimmed and lowercased, so " Work " and "work"
are the same tag. Each user has at most one tag per name.

Usage:
======
    from cerebero.shared.services.tag_service import TagService

    service = TagService(storage)
    tag, created = await service.get_or_create(user_id, "Reading")
    await service.attach(user_id, content_id, tag.id)
"""

from dataclasses import dataclass, field
from typing import Optional

from cerebero.shared.adapters.openai_adapter import OpenAIAdapter
from cerebero.shared.core.exceptions import (
    ConflictError,
    ContentNotFoundError,
    TagNotFoundError,
    ValidationError,
)
from cerebero.shared.core.logging import get_logger
from cerebero.shared.repositories.ports import Storage
from cerebero.shared.schemas.records import ContentRecord, TagRecord
from cerebero.shared.utils.text import normalize_tag_name


logger = get_logger(__name__)

DEFAULT_TOP_TAG_LIMIT = 5
DEFAULT_TOP_CONTENT_LIMIT = 5
MAX_TOP_LIMIT = 20

SUGGESTION_SYSTEM_PROMPT = "You label saved bookmarks with short topical tags."
SUGGESTION_PROMPT = (
    "Given the title below, suggest 2 to 3 relevant tags. Each tag should be a "
    "single lowercase word using only alphabetic characters (no numbers or "
    "special characters). Return only the tag names as a comma-separated list "
    'with no additional text. Title: "{title}"'
)
MAX_SUGGESTIONS = 3


@dataclass
class TopTagSummary:
    """A tag with its usage count and its most recently attached content."""

    tag: TagRecord
    usage_count: int
    content: list[ContentRecord] = field(default_factory=list)


class TagService:
    """
    Service for tag-related business logic.

    Handles:
    - Idempotent create, rename with uniqueness check, cascading delete
    - Attaching and detaching tags on owned content
    - Top tags aggregation
    - AI tag suggestions
    """

    def __init__(self, storage: Storage, ai: Optional[OpenAIAdapter] = None) -> None:
        self.storage = storage
        self.ai = ai

    @staticmethod
    def normalize(name: str) -> str:
        """
        Raises:
            ValidationError: If nothing is left after trimming
        """
        normalized = normalize_tag_name(name or "")
        if not normalized:
            raise ValidationError("Tag name is required", details={"field": "name"})
        return normalized

    # ═══════════════════════════════════════════════════════════════════════════
    # TAG CRUD
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_or_create(self, user_id: str, name: str) -> tuple[TagRecord, bool]:
        """
        Return the user's tag with this name, creating it if needed.

        Returns:
            Tuple of (tag, created)
        """
        tag, created = await self.storage.tags.get_or_create(user_id, self.normalize(name))
        if created:
            logger.info("tag_created", user_id=user_id, tag_id=tag.id)
        return tag, created

    async def list_by_user(self, user_id: str) -> list[TagRecord]:
        return await self.storage.tags.list_by_user(user_id)

    async def rename(self, user_id: str, tag_id: str, name: str) -> TagRecord:
        """
        Raises:
            TagNotFoundError: If the tag is absent or not owned
            ConflictError: If another owned tag already has the name
        """
        tag = await self.storage.tags.rename(user_id, tag_id, self.normalize(name))
        if tag is None:
            raise TagNotFoundError(tag_id)
        logger.info("tag_renamed", user_id=user_id, tag_id=tag_id)
        return tag

    async def delete(self, user_id: str, tag_id: str) -> None:
        """Delete the tag and every content link to it."""
        if not await self.storage.tags.delete(user_id, tag_id):
            raise TagNotFoundError(tag_id)
        logger.info("tag_deleted", user_id=user_id, tag_id=tag_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # CONTENT LINKS
    # ═══════════════════════════════════════════════════════════════════════════

    async def _require_content(self, user_id: str, content_id: str) -> ContentRecord:
        content = await self.storage.content.get_by_id(user_id, content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        return content

    async def _require_tag(self, user_id: str, tag_id: str) -> TagRecord:
        tag = await self.storage.tags.get_by_id(user_id, tag_id)
        if tag is None:
            raise TagNotFoundError(tag_id)
        return tag

    async def attach(self, user_id: str, content_id: str, tag_id: str) -> None:
        """
        Raises:
            ContentNotFoundError: If the content is absent or not owned
            TagNotFoundError: If the tag is absent or not owned
            ConflictError: If the tag is already attached
        """
        await self._require_content(user_id, content_id)
        await self._require_tag(user_id, tag_id)

        if not await self.storage.content_tags.attach(user_id, content_id, tag_id):
            raise ConflictError(
                "Tag already attached to content",
                details={"content_id": content_id, "tag_id": tag_id},
            )
        logger.info("tag_attached", user_id=user_id, content_id=content_id, tag_id=tag_id)

    async def detach(self, user_id: str, content_id: str, tag_id: str) -> bool:
        """
        Remove a tag from content. Detaching a tag that is not attached
        succeeds and returns False.

        Raises:
            TagNotFoundError: If the tag is absent or not owned
        """
        await self._require_tag(user_id, tag_id)

        removed = await self.storage.content_tags.detach(user_id, content_id, tag_id)
        if removed:
            logger.info("tag_detached", user_id=user_id, content_id=content_id, tag_id=tag_id)
        return removed

    async def list_for_content(self, user_id: str, content_id: str) -> list[TagRecord]:
        await self._require_content(user_id, content_id)
        return await self.storage.tags.list_by_content(user_id, content_id)

    async def replace_for_content(
        self, user_id: str, content_id: str, names: list[str]
    ) -> list[TagRecord]:
        """
        Make ``names`` the item's complete tag set.

        Each name is normalised and get-or-created; links not in the new set
        are removed and missing ones added.
        """
        await self._require_content(user_id, content_id)

        wanted: dict[str, TagRecord] = {}
        for name in names:
            normalized = normalize_tag_name(name or "")
            if not normalized or normalized in wanted:
                continue
            tag, _ = await self.get_or_create(user_id, normalized)
            wanted[normalized] = tag

        current = await self.storage.tags.list_by_content(user_id, content_id)
        wanted_ids = {tag.id for tag in wanted.values()}
        current_ids = {tag.id for tag in current}

        for tag in current:
            if tag.id not in wanted_ids:
                await self.storage.content_tags.detach(user_id, content_id, tag.id)
        for tag in wanted.values():
            if tag.id not in current_ids:
                await self.storage.content_tags.attach(user_id, content_id, tag.id)

        logger.info(
            "content_tags_replaced",
            user_id=user_id,
            content_id=content_id,
            tag_count=len(wanted),
        )
        return sorted(wanted.values(), key=lambda tag: tag.name)

    # ═══════════════════════════════════════════════════════════════════════════
    # AGGREGATION
    # ═══════════════════════════════════════════════════════════════════════════

    @staticmethod
    def clamp_limit(value: int, name: str) -> int:
        """
        Raises:
            ValidationError: If ``value`` is not positive
        """
        if value < 1:
            raise ValidationError(
                f"'{name}' must be a positive integer",
                details={"field": name},
            )
        return min(value, MAX_TOP_LIMIT)

    async def top_with_content(
        self,
        user_id: str,
        tag_limit: int = DEFAULT_TOP_TAG_LIMIT,
        content_limit: int = DEFAULT_TOP_CONTENT_LIMIT,
    ) -> list[TopTagSummary]:
        """
        Rank the user's tags by how many content links they have.

        Ties are broken by name. Each tag carries the ``content_limit`` most
        recently attached items. Tags with no links are included with a
        count of zero.
        """
        tag_limit = self.clamp_limit(tag_limit, "tagLimit")
        content_limit = self.clamp_limit(content_limit, "contentLimit")

        tags = await self.storage.tags.list_by_user(user_id)
        if not tags:
            return []

        links = await self.storage.content_tags.list_by_user(user_id)
        content_by_id = {item.id: item for item in await self.storage.content.list_by_user(user_id)}

        summaries = {tag.id: TopTagSummary(tag=tag, usage_count=0) for tag in tags}
        for link in links:  # newest first
            summary = summaries.get(link.tag_id)
            if summary is None:
                continue
            summary.usage_count += 1
            content = content_by_id.get(link.content_id)
            if content is not None and len(summary.content) < content_limit:
                summary.content.append(content)

        ranked = sorted(summaries.values(), key=lambda s: (-s.usage_count, s.tag.name))
        return ranked[:tag_limit]

    # ═══════════════════════════════════════════════════════════════════════════
    # SUGGESTIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def suggest(self, title: str) -> list[str]:
        """
        Ask the completion model for tags fitting ``title``.

        Raises:
            ValidationError: If the title is blank
            UpstreamUnavailableError: If the model call fails
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required", details={"field": "title"})
        if self.ai is None:
            raise RuntimeError("TagService.suggest needs an AI adapter")

        text = await self.ai.complete(
            SUGGESTION_SYSTEM_PROMPT,
            SUGGESTION_PROMPT.format(title=title),
        )
        return parse_suggestions(text)


def parse_suggestions(text: str) -> list[str]:
    """
    Split a comma-separated model reply into clean tag names.

    Keeps single alphabetic words only, lowercased and de-duplicated.
    """
    tags: list[str] = []
    for part in text.split(","):
        tag = part.strip().strip("\"'.").lower()
        if tag and tag.isalpha() and tag not in tags:
            tags.append(tag)
    return tags[:MAX_SUGGESTIONS]
