"""
Authentication Service

Business logic for credentials signup, login and public profiles.

Service Pattern:
================
Services encapsulate business logic and coordinate between:
- Stores (data access through the storage port)
- External services (if any)
- Domain logic

Usage:
======
    from cerebero.shared.services.auth_service import AuthService

    service = AuthService(storage, settings)
    user = await service.signup(email, name, password)
    user, token, expires = await service.login(email, password)
"""

from typing import Tuple

from cerebero.config.settings import Settings
from cerebero.shared.core.exceptions import (
    AuthenticationError,
    ConflictError,
    UserNotFoundError,
)
from cerebero.shared.core.logging import get_logger
from cerebero.shared.repositories.ports import Storage
from cerebero.shared.schemas.records import UserRecord
from cerebero.shared.utils.security import SecurityUtils


logger = get_logger(__name__)


class AuthService:
    """
    Service for authentication-related business logic.

    Handles:
    - Credentials signup (email uniqueness, bcrypt hashing)
    - Login and session token issue
    - Public profile lookup

    Attributes:
        storage: Stores for the current unit of work
        settings: Token lifetime and signing configuration
    """

    def __init__(self, storage: Storage, settings: Settings) -> None:
        self.storage = storage
        self.settings = settings

    async def signup(self, email: str, name: str, password: str) -> UserRecord:
        """
        Register a credentials user.

        The email pre-check gives a clean message; the unique constraint on
        email still catches a concurrent signup and surfaces as the same
        conflict.

        Raises:
            ConflictError: If the email is already registered
        """
        email = email.strip().lower()

        if await self.storage.users.get_by_email(email):
            raise ConflictError("User already exists", details={"field": "email"})

        password_hash = SecurityUtils.hash_password(password)

        try:
            user = await self.storage.users.create(
                email=email,
                name=name.strip(),
                password_hash=password_hash,
            )
        except ConflictError as e:
            raise ConflictError("User already exists", details={"field": "email"}) from e

        logger.info("user_signed_up", user_id=user.id)
        return user

    async def login(self, email: str, password: str) -> Tuple[UserRecord, str, int]:
        """
        Authenticate user and generate token.

        Returns:
            Tuple of (user, access_token, expires_in_seconds)

        Raises:
            AuthenticationError: If credentials are invalid
        """
        user = await self.storage.users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        if not SecurityUtils.verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        access_token, expires_in = SecurityUtils.create_session_token(
            self.settings,
            user_id=user.id,
            email=user.email,
        )

        logger.info("user_logged_in", user_id=user.id)
        return user, access_token, expires_in

    async def get_public_profile(self, user_id: str) -> UserRecord:
        """
        Raises:
            UserNotFoundError: If no user has this id
        """
        user = await self.storage.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
