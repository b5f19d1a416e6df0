"""
Authentication Dependencies

FastAPI dependencies for session authentication.

Dependency Hierarchy:
=====================
    get_session_claims()      ← Extract and validate JWT from header
           │
           ▼
    get_current_user_id()     ← Resolve claims to a user id (IdentityService)

Type Aliases:
=============
    CurrentUserId   - Id of the authenticated user

Usage:
======
    from cerebero.api.dependencies.auth import CurrentUserId

    @router.get("/content")
    async def list_content(user_id: CurrentUserId, ...):
        ...
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cerebero.api.dependencies.storage import AppSettings, RequestStorage
from cerebero.shared.core.exceptions import AuthenticationError
from cerebero.shared.core.logging import log_context
from cerebero.shared.services.identity_service import IdentityService, SessionClaims
from cerebero.shared.utils.security import SecurityUtils


# Security scheme for Bearer tokens; a missing header is reported as 401 below
security = HTTPBearer(auto_error=False)


async def get_session_claims(
    settings: AppSettings,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)] = None,
) -> SessionClaims:
    """
    Extract and validate the JWT from the Authorization header.

    Raises:
        AuthenticationError: If the token is missing or invalid
    """
    if not credentials:
        raise AuthenticationError("Authorization header required")

    try:
        payload = SecurityUtils.decode_access_token(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
    except ValueError as e:
        raise AuthenticationError(str(e)) from e

    return SessionClaims.from_payload(payload)


async def get_current_user_id(
    claims: Annotated[SessionClaims, Depends(get_session_claims)],
    storage: RequestStorage,
) -> str:
    """
    Resolve the acting user for this request.

    Raises:
        AuthenticationError: If the claims resolve to no known user
        IdentityResolutionError: If the user lookup fails
    """
    user_id = await IdentityService(storage.users).resolve(claims)
    if not user_id:
        raise AuthenticationError()

    log_context(user_id=user_id)
    return user_id


# ═══════════════════════════════════════════════════════════════════════════════
# TYPE ALIASES
# ═══════════════════════════════════════════════════════════════════════════════

CurrentUserId = Annotated[str, Depends(get_current_user_id)]
