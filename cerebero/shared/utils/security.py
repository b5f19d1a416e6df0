"""
Security Utilities

Password hashing and session token management.

Password Hashing:
=================
bcrypt via passlib, with automatic salt generation.

Session Tokens:
===============
Sessions are HS256 JWTs signed with ``SECRET_KEY``. A token carries the
user's ``user_id`` and ``email``; a token issued before the user id was
known (e.g. straight after OAuth linking) may carry only ``email``, and the
identity resolver looks the user up by it.

    {"user_id": "550e8400-...", "email": "ada@example.com", "exp": ..., "iat": ...}

Usage:
======
    from cerebero.shared.utils.security import SecurityUtils

    hashed = SecurityUtils.hash_password("Secr3t!pass")
    SecurityUtils.verify_password("Secr3t!pass", hashed)  # True

    token, expires_in = SecurityUtils.create_session_token(settings, user_id, email)
    claims = SecurityUtils.decode_access_token(token, settings.SECRET_KEY)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from passlib.context import CryptContext

from cerebero.config.settings import Settings


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


class SecurityUtils:
    """Password hashing and JWT helpers."""

    # ═══════════════════════════════════════════════════════════════════════════
    # PASSWORD HASHING
    # ═══════════════════════════════════════════════════════════════════════════

    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify password against a bcrypt hash.

        Users created through OAuth have no hash; they never match.
        """
        if not hashed_password:
            return False
        return pwd_context.verify(plain_password, hashed_password)

    # ═══════════════════════════════════════════════════════════════════════════
    # JWT TOKENS
    # ═══════════════════════════════════════════════════════════════════════════

    @staticmethod
    def create_access_token(
        data: dict[str, Any],
        secret_key: str,
        expires_delta: Optional[timedelta] = None,
        algorithm: str = "HS256",
    ) -> str:
        """
        Create a signed JWT.

        Args:
            data: Claims to encode (user_id, email)
            secret_key: Signing key
            expires_delta: Lifetime (default: 7 days)
            algorithm: JWT algorithm (default: HS256)
        """
        now = datetime.now(timezone.utc)
        to_encode = data.copy()
        to_encode.update({
            "exp": now + (expires_delta or timedelta(days=7)),
            "iat": now,
        })
        return jwt.encode(to_encode, secret_key, algorithm=algorithm)

    @staticmethod
    def create_session_token(
        settings: Settings,
        user_id: Optional[str],
        email: Optional[str],
    ) -> tuple[str, int]:
        """
        Issue a session token for a user.

        Returns:
            Tuple of (token, expires_in_seconds)
        """
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        claims = {key: value for key, value in {"user_id": user_id, "email": email}.items() if value}
        token = SecurityUtils.create_access_token(
            data=claims,
            secret_key=settings.SECRET_KEY,
            expires_delta=expires_delta,
            algorithm=settings.JWT_ALGORITHM,
        )
        return token, int(expires_delta.total_seconds())

    @staticmethod
    def decode_access_token(
        token: str,
        secret_key: str,
        algorithm: str = "HS256",
    ) -> dict[str, Any]:
        """
        Decode and verify a JWT.

        Raises:
            ValueError: If the token is expired or invalid
        """
        try:
            return jwt.decode(token, secret_key, algorithms=[algorithm])
        except jwt.ExpiredSignatureError:
            raise ValueError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid token: {str(e)}")
