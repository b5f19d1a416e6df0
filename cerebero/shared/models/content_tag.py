"""
ContentTag Entity Model

Join row between Content and Tag. Carries the owning user id so ownership
checks never need to read the parent rows.

    Content ──< ContentTag >── Tag
"""

from datetime import datetime
import uuid

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from cerebero.shared.models.base import Base, utcnow


class ContentTag(Base):
    """
    ContentTag model.

    ``(user_id, content_id, tag_id)`` is unique; a second attach of the same
    pair violates the constraint instead of creating a duplicate row.
    """

    __tablename__ = "content_tags"

    __table_args__ = (
        UniqueConstraint(
            "user_id", "content_id", "tag_id", name="uq_content_tags_user_content_tag"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("content.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    tag_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Join rows are never updated, so only the creation time is tracked
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ContentTag(content_id={self.content_id}, tag_id={self.tag_id})>"
