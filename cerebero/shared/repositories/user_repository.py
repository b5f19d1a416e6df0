"""
User Repository

SQL implementation of ``UserStore``.

Common Operations:
==================
- get_by_id()      → Find user by id
- get_by_email()   → Find user by (lowercased) email
- create()         → Insert a credentials user; duplicate email → ConflictError

Email Uniqueness:
=================
The service checks ``get_by_email`` first for a friendly error, but the
unique index on ``users.email`` is what actually prevents duplicates when
two signups race. The violation surfaces as ``ConflictError``.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cerebero.shared.models.enums import AuthProvider
from cerebero.shared.models.user import User
from cerebero.shared.repositories.base import BaseRepository, parse_id, storage_operation
from cerebero.shared.schemas.records import UserRecord


class UserRepository(BaseRepository[User, UserRecord]):
    """Repository for User database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(User, UserRecord, session)

    @storage_operation
    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        """
        SQL Generated:
            SELECT * FROM users WHERE id = '...'
        """
        key = parse_id(user_id)
        if key is None:
            return None
        result = await self.session.execute(select(User).where(User.id == key))
        user = result.scalar_one_or_none()
        return self.to_record(user) if user else None

    @storage_operation
    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        """
        Get user by email address.

        Emails are stored lowercased, so the lookup lowercases too.

        SQL Generated:
            SELECT * FROM users WHERE email = 'ada@example.com'
        """
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        user = result.scalar_one_or_none()
        return self.to_record(user) if user else None

    @storage_operation
    async def create(self, email: str, name: str, password_hash: str) -> UserRecord:
        user = await self.insert(
            email=email.strip().lower(),
            name=name.strip(),
            provider=AuthProvider.CREDENTIALS,
            password_hash=password_hash,
        )
        return self.to_record(user)
