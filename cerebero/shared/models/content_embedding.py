"""
ContentEmbedding Entity Model

At most one embedding vector per content item, used by semantic search.
The vector is stored as a JSON float array; similarity is computed in the
application (see ``EmbeddingService``).
"""

import uuid

from sqlalchemy import ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cerebero.shared.models.base import Base, TimestampMixin


class ContentEmbedding(Base, TimestampMixin):
    """ContentEmbedding model."""

    __tablename__ = "content_embeddings"

    __table_args__ = (
        UniqueConstraint("user_id", "content_id", name="uq_content_embeddings_user_content"),
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
    )

    embedding: Mapped[list[float]] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<ContentEmbedding(content_id={self.content_id}, dims={len(self.embedding)})>"
