"""
Relational Storage Backend

SQLAlchemy implementation of ``StorageBackend``.

Request Lifecycle:
==================
    1. Handler dependency enters ``backend.session()``
    2. New AsyncSession created from the pool
    3. ``Storage`` bundle of repositories yielded to the service
    4. On success: session.commit()
    5. On exception: session.rollback(), exception re-raised
    6. Finally: session closed (connection returned to the pool)

Every multi-step operation a service runs inside one ``session()`` block
(cascade delete, batch import, create-with-tags) is therefore one
transaction. ``Storage.savepoint`` is ``session.begin_nested``, which lets a
best-effort step fail without poisoning that transaction.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from cerebero.config.settings import Settings
from cerebero.shared.core.exceptions import StorageUnavailableError
from cerebero.shared.core.logging import get_logger
from cerebero.shared.db.session import create_engine, create_session_factory
from cerebero.shared.models import Base
from cerebero.shared.repositories.content_repository import ContentRepository
from cerebero.shared.repositories.content_tag_repository import ContentTagRepository
from cerebero.shared.repositories.embedding_repository import EmbeddingRepository
from cerebero.shared.repositories.ports import Storage
from cerebero.shared.repositories.tag_repository import TagRepository
from cerebero.shared.repositories.todo_repository import TodoRepository
from cerebero.shared.repositories.user_repository import UserRepository


logger = get_logger(__name__)


def build_storage(session: AsyncSession) -> Storage:
    """Bind every SQL repository to one session."""
    return Storage(
        users=UserRepository(session),
        content=ContentRepository(session),
        tags=TagRepository(session),
        content_tags=ContentTagRepository(session),
        embeddings=EmbeddingRepository(session),
        todos=TodoRepository(session),
        savepoint=session.begin_nested,
    )


class SqlBackend:
    """
    Relational storage backend.

    Args:
        settings: Application settings (DATABASE_* keys)
        engine: Pre-built engine; tests pass one bound to in-memory SQLite
    """

    name = "sql"

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None) -> None:
        self.settings = settings
        self.engine = engine or create_engine(settings)
        self.session_factory: async_sessionmaker[AsyncSession] = create_session_factory(
            self.engine
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════════

    async def startup(self) -> None:
        """
        Verify connectivity and, if configured, create missing tables.

        Raises:
            StorageUnavailableError: If the database cannot be reached
        """
        logger.info("storage_starting", backend=self.name)
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.settings.DATABASE_AUTO_CREATE:
                    await conn.run_sync(Base.metadata.create_all)
                    logger.info("storage_schema_created", backend=self.name)
        except (SQLAlchemyError, OSError) as e:
            logger.error("storage_startup_failed", backend=self.name, error=str(e))
            raise StorageUnavailableError() from e
        logger.info("storage_ready", backend=self.name)

    async def shutdown(self) -> None:
        await self.engine.dispose()
        logger.info("storage_closed", backend=self.name)

    async def create_schema(self) -> None:
        """Create every table. Used by tests and DATABASE_AUTO_CREATE."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("storage_ping_failed", backend=self.name, error=str(e))
            return False

    # ═══════════════════════════════════════════════════════════════════════════
    # UNIT OF WORK
    # ═══════════════════════════════════════════════════════════════════════════

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Storage]:
        async with self.session_factory() as session:
            try:
                yield build_storage(session)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("storage_commit_failed", backend=self.name, error=str(e))
                raise StorageUnavailableError() from e
            except Exception:
                await session.rollback()
                raise
