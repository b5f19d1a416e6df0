# pylint: skip-file
# ruff: noqa
"""Initial schema - create all tables

Revision ID: 001
Revises:
Create Date: 2025-03-01 00:00:00

This migration creates all database tables for the Cerebero application.
Column types are the dialect-neutral ones the models use (Uuid, JSON,
non-native enums), so the same revision runs on PostgreSQL and SQLite.

Tables created:
- users: User accounts (credentials and OAuth)
- content: Saved items
- tags: User-scoped labels
- content_tags: Content <-> tag join rows
- content_embeddings: One vector per content item
- todos: Daily todo list
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


content_type_enum = sa.Enum(
    "document",
    "tweet",
    "youtube",
    "link",
    name="contenttype",
    native_enum=False,
    length=20,
)

auth_provider_enum = sa.Enum(
    "credentials",
    "google",
    name="authprovider",
    native_enum=False,
    length=20,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    # ═══════════════════════════════════════════════════════════════════════════
    # USERS
    # ═══════════════════════════════════════════════════════════════════════════
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("provider", auth_provider_enum, nullable=False),
        sa.Column("provider_id", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # CONTENT
    # ═══════════════════════════════════════════════════════════════════════════
    op.create_table(
        "content",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("type", content_type_enum, nullable=False),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("is_shared", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_favourite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("share_id", sa.String(64), nullable=True, unique=True),
        *_timestamps(),
    )
    op.create_index("ix_content_user_id", "content", ["user_id"])
    op.create_index("ix_content_user_updated", "content", ["user_id", "updated_at"])

    # ═══════════════════════════════════════════════════════════════════════════
    # TAGS
    # ═══════════════════════════════════════════════════════════════════════════
    op.create_table(
        "tags",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
    )
    op.create_index("ix_tags_user_id", "tags", ["user_id"])

    # ═══════════════════════════════════════════════════════════════════════════
    # CONTENT TAGS
    # ═══════════════════════════════════════════════════════════════════════════
    op.create_table(
        "content_tags",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "content_id",
            sa.Uuid(),
            sa.ForeignKey("content.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "tag_id",
            sa.Uuid(),
            sa.ForeignKey("tags.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint(
            "user_id", "content_id", "tag_id", name="uq_content_tags_user_content_tag"
        ),
    )
    op.create_index("ix_content_tags_user_id", "content_tags", ["user_id"])
    op.create_index("ix_content_tags_content_id", "content_tags", ["content_id"])
    op.create_index("ix_content_tags_tag_id", "content_tags", ["tag_id"])

    # ═══════════════════════════════════════════════════════════════════════════
    # CONTENT EMBEDDINGS
    # ═══════════════════════════════════════════════════════════════════════════
    op.create_table(
        "content_embeddings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "content_id",
            sa.Uuid(),
            sa.ForeignKey("content.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("embedding", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "content_id", name="uq_content_embeddings_user_content"),
    )
    op.create_index("ix_content_embeddings_user_id", "content_embeddings", ["user_id"])

    # ═══════════════════════════════════════════════════════════════════════════
    # TODOS
    # ═══════════════════════════════════════════════════════════════════════════
    op.create_table(
        "todos",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(280), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_todos_user_id", "todos", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_todos_user_id", table_name="todos")
    op.drop_table("todos")

    op.drop_index("ix_content_embeddings_user_id", table_name="content_embeddings")
    op.drop_table("content_embeddings")

    op.drop_index("ix_content_tags_tag_id", table_name="content_tags")
    op.drop_index("ix_content_tags_content_id", table_name="content_tags")
    op.drop_index("ix_content_tags_user_id", table_name="content_tags")
    op.drop_table("content_tags")

    op.drop_index("ix_tags_user_id", table_name="tags")
    op.drop_table("tags")

    op.drop_index("ix_content_user_updated", table_name="content")
    op.drop_index("ix_content_user_id", table_name="content")
    op.drop_table("content")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
