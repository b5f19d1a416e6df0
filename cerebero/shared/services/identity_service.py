"""
Identity Service

Turns the claims of an authenticated session into a user id.

Resolution order:
=================
1. No claims at all            → AuthenticationError
2. Claims carry ``user_id``    → that id
3. Claims carry only ``email`` → look the user up by email
   - found                     → the user's id
   - not found                 → None (caller treats it as unauthenticated)
   - lookup failed             → IdentityResolutionError

Sessions issued right after an OAuth link may carry only an email, which is
why step 3 exists. Resolution runs on every request; nothing is cached.

Usage:
======
    from cerebero.shared.services.identity_service import IdentityService, SessionClaims

    user_id = await IdentityService(storage.users).resolve(SessionClaims(email="a@b.c"))
"""

from dataclasses import dataclass
from typing import Any, Optional

from cerebero.shared.core.exceptions import (
    AuthenticationError,
    IdentityResolutionError,
    StorageUnavailableError,
)
from cerebero.shared.core.logging import get_logger
from cerebero.shared.repositories.ports import UserStore


logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionClaims:
    """The identity part of a decoded session token."""

    user_id: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SessionClaims":
        user_id = payload.get("user_id") or payload.get("sub")
        email = payload.get("email")
        return cls(
            user_id=str(user_id) if user_id else None,
            email=str(email).lower() if email else None,
        )

    @property
    def is_empty(self) -> bool:
        return not self.user_id and not self.email


class IdentityService:
    def __init__(self, users: UserStore) -> None:
        self.users = users

    async def resolve(self, claims: Optional[SessionClaims]) -> Optional[str]:
        """
        Resolve the acting user's id.

        Raises:
            AuthenticationError: If there is no session user
            IdentityResolutionError: If the email lookup itself fails
        """
        if claims is None or claims.is_empty:
            raise AuthenticationError()

        if claims.user_id:
            return claims.user_id

        try:
            user = await self.users.get_by_email(claims.email)
        except StorageUnavailableError as e:
            logger.error("identity_lookup_failed", email=claims.email, error=str(e))
            raise IdentityResolutionError() from e

        if user is None:
            logger.info("identity_email_unknown", email=claims.email)
            return None
        return user.id
