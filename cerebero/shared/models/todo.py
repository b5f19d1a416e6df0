"""
Todo Entity Model

A short-lived task on the user's daily list. No children, no cascade.
"""

import uuid

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cerebero.shared.models.base import Base, TimestampMixin


class Todo(Base, TimestampMixin):
    """Todo model."""

    __tablename__ = "todos"

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

    title: Mapped[str] = mapped_column(String(280), nullable=False)

    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, completed={self.completed})>"
