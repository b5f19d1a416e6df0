"""
Base Repository

Generic base class for the SQL storage adapters. Every repository is bound
to one model, one record type and one ``AsyncSession``, and scopes every
query by the acting user.

What This Provides:
===================
- get_owned(user_id, id)   → Fetch one row owned by the user (or None)
- list_owned(user_id)      → All rows owned by the user, ordered
- count(...)               → Count rows matching a WHERE clause
- insert(**kwargs)         → INSERT + flush + refresh
- to_record(row)           → ORM row → storage record
- storage_operation        → Decorator mapping driver errors to app errors

Generic Type Pattern:
=====================
    class TodoRepository(BaseRepository[Todo, TodoRecord]):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(Todo, TodoRecord, session)

Ids:
====
Ids cross the storage port as strings. A string that is not a valid UUID
cannot name any row, so reads treat it as "not found" instead of letting
the driver raise.

flush() vs commit():
====================
Repository methods only ``flush()``. The unit of work in
``SqlBackend.session()`` commits once when the request's work succeeds
and rolls back if anything raised.
"""

import functools
from typing import Any, Awaitable, Callable, Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from cerebero.shared.core.exceptions import (
    ConflictError,
    StorageUnavailableError,
    ValidationError,
)
from cerebero.shared.core.logging import get_logger
from cerebero.shared.models.base import Base
from cerebero.shared.schemas.records import Record


logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
RecordType = TypeVar("RecordType", bound=Record)
ReturnType = TypeVar("ReturnType")


def storage_operation(
    func: Callable[..., Awaitable[ReturnType]],
) -> Callable[..., Awaitable[ReturnType]]:
    """
    Translate SQLAlchemy/driver failures into application errors.

    - IntegrityError (unique violation) → ConflictError
    - any other SQLAlchemyError, or a socket/timeout error → StorageUnavailableError

    The original exception is logged; the raised error carries no driver detail.
    """

    @functools.wraps(func)
    async def wrapper(self: "BaseRepository[Any, Any]", *args: Any, **kwargs: Any) -> ReturnType:
        try:
            return await func(self, *args, **kwargs)
        except IntegrityError as e:
            logger.info(
                "storage_conflict",
                operation=func.__qualname__,
                error=str(e.orig),
            )
            raise ConflictError("Resource already exists") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "storage_operation_failed",
                operation=func.__qualname__,
                error=str(e),
                exc_info=True,
            )
            raise StorageUnavailableError() from e

    return wrapper


def parse_id(value: Optional[str]) -> Optional[UUID]:
    """Parse an id string; None if it is not a UUID."""
    if value is None:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


def require_id(value: str, field: str = "id") -> UUID:
    """Parse an id string that must be valid because it is about to be written."""
    parsed = parse_id(value)
    if parsed is None:
        raise ValidationError(f"Malformed {field}", details={"field": field})
    return parsed


class BaseRepository(Generic[ModelType, RecordType]):
    """
    Generic base repository scoped by owning user.

    Type Parameters:
        ModelType: SQLAlchemy model class
        RecordType: Storage record returned across the port

    Attributes:
        model: The SQLAlchemy model class
        record_type: The pydantic record class
        session: The async session of the current unit of work
    """

    def __init__(
        self,
        model: Type[ModelType],
        record_type: Type[RecordType],
        session: AsyncSession,
    ) -> None:
        self.model = model
        self.record_type = record_type
        self.session = session

    def to_record(self, instance: ModelType) -> RecordType:
        return self.record_type.model_validate(instance)

    # ═══════════════════════════════════════════════════════════════════════════
    # READ OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_owned(self, user_id: str, record_id: str) -> Optional[ModelType]:
        """
        Get one row by id, only if it belongs to ``user_id``.

        SQL Generated:
            SELECT * FROM todos WHERE id = '...' AND user_id = '...'
        """
        owner = parse_id(user_id)
        key = parse_id(record_id)
        if owner is None or key is None:
            return None

        result = await self.session.execute(
            select(self.model).where(
                self.model.id == key,
                self.model.user_id == owner,
            )
        )
        return result.scalar_one_or_none()

    async def list_owned(
        self,
        user_id: str,
        *order_by: ColumnElement[Any],
        where: Optional[list[ColumnElement[bool]]] = None,
        limit: Optional[int] = None,
    ) -> list[ModelType]:
        """
        List rows owned by ``user_id``.

        Example:
            rows = await repo.list_owned(user_id, Todo.created_at.asc())

        SQL Generated:
            SELECT * FROM todos WHERE user_id = '...' ORDER BY created_at ASC
        """
        owner = parse_id(user_id)
        if owner is None:
            return []

        query = select(self.model).where(self.model.user_id == owner)
        for clause in where or []:
            query = query.where(clause)
        if order_by:
            query = query.order_by(*order_by)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, *where: ColumnElement[bool]) -> int:
        """
        Count rows matching ``where``.

        SQL Generated:
            SELECT COUNT(*) FROM content_tags WHERE user_id = '...' AND tag_id = '...'
        """
        query = select(sql_count()).select_from(self.model)
        for clause in where:
            query = query.where(clause)
        result = await self.session.execute(query)
        return result.scalar() or 0

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def insert(self, **kwargs: Any) -> ModelType:
        """
        Insert a row and return it with every default populated.

        SQL Generated:
            INSERT INTO todos (id, user_id, title, ...) VALUES (...)
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def save(self, instance: ModelType) -> ModelType:
        """Flush pending changes on ``instance`` and reload it."""
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def remove(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.flush()
