"""
Content Entity Model

A saved item: a document, tweet, YouTube video or generic link.

SAMPLE CONTENT RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 7d3f...                                                   │
│ user_id          │ 550e8400-e29b-41d4-a716-446655440000                      │
│ title            │ "Rust Book"                                               │
│ type             │ "link"                                                    │
│ url              │ "https://example.com/rust"                                │
│ body             │ null                                                      │
│ is_shared        │ false                                                     │
│ is_favourite     │ true                                                      │
│ share_id         │ null  (minted on first share, then kept)                  │
└──────────────────────────────────────────────────────────────────────────────┘

Children:
=========
    Content
       ├── content_tags (ContentTag[])       ← removed before the content row
       └── embedding (ContentEmbedding?)     ← removed before the content row
"""

from typing import Optional
import uuid

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cerebero.shared.models.base import Base, TimestampMixin
from cerebero.shared.models.enums import ContentType


class Content(Base, TimestampMixin):
    """
    Content model.

    ``url`` and ``body`` carry the payload depending on ``type`` (documents
    use body, everything else a url). That is a convention, not a constraint.
    """

    __tablename__ = "content"

    __table_args__ = (
        # Serves list-by-user ordered by recency
        Index("ix_content_user_updated", "user_id", "updated_at"),
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

    # ═══════════════════════════════════════════════════════════════════════════
    # PAYLOAD
    # ═══════════════════════════════════════════════════════════════════════════

    title: Mapped[str] = mapped_column(Text, nullable=False)

    type: Mapped[ContentType] = mapped_column(
        SQLEnum(
            ContentType,
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )

    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # FLAGS & SHARING
    # ═══════════════════════════════════════════════════════════════════════════

    is_shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_favourite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Public lookup token; only resolvable while is_shared is true
    share_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        unique=True,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Content(id={self.id}, type={self.type}, title={self.title!r})>"
