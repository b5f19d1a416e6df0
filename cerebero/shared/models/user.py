"""
User Entity Model

Represents a registered application user.

SAMPLE USER RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 550e8400-e29b-41d4-a716-446655440000                      │
│ email            │ "ada@example.com"                                         │
│ name             │ "Ada Lovelace"                                            │
│ image            │ null                                                      │
│ provider         │ "credentials"                                             │
│ provider_id      │ null                                                      │
│ password_hash    │ "$2b$12$..."                                              │
│ created_at       │ 2025-01-01T00:00:00Z                                      │
└──────────────────────────────────────────────────────────────────────────────┘

Email is stored lowercased; the unique constraint is the authority for
"email already registered", not the pre-insert lookup.
"""

from typing import Optional
import uuid

from sqlalchemy import Enum as SQLEnum, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cerebero.shared.models.base import Base, TimestampMixin
from cerebero.shared.models.enums import AuthProvider


class User(Base, TimestampMixin):
    """
    User model.

    Attributes:
        id: Unique identifier (UUID v4)
        email: Lowercased email address (unique)
        name: Display name
        image: Optional avatar URL
        provider: credentials | google
        provider_id: Id at the OAuth provider, if any
        password_hash: Bcrypt hash, only for credential users
    """

    __tablename__ = "users"

    # ═══════════════════════════════════════════════════════════════════════════
    # PRIMARY KEY
    # ═══════════════════════════════════════════════════════════════════════════

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # IDENTITY
    # ═══════════════════════════════════════════════════════════════════════════

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # AUTHENTICATION
    # ═══════════════════════════════════════════════════════════════════════════

    provider: Mapped[AuthProvider] = mapped_column(
        SQLEnum(
            AuthProvider,
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=AuthProvider.CREDENTIALS,
    )

    provider_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    password_hash: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
