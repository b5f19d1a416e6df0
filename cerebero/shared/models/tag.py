"""
Tag Entity Model

A user-scoped label. Names are stored trimmed and lowercased, and
``(user_id, name)`` is unique, so "Work" and " work " are the same tag.
"""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cerebero.shared.models.base import Base, TimestampMixin


class Tag(Base, TimestampMixin):
    """Tag model."""

    __tablename__ = "tags"

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
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

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name})>"
