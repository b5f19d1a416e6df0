"""Tests for session identity resolution and credentials auth."""

import pytest

from cerebero.shared.core.exceptions import (
    AuthenticationError,
    ConflictError,
    IdentityResolutionError,
    StorageUnavailableError,
    UserNotFoundError,
)
from cerebero.shared.services.auth_service import AuthService
from cerebero.shared.services.identity_service import IdentityService, SessionClaims
from cerebero.shared.utils.security import SecurityUtils

from conftest import TEST_PASSWORD


class FailingUserStore:
    """User store whose lookups always fail."""

    def __init__(self):
        self.lookups = 0

    async def get_by_email(self, email):
        self.lookups += 1
        raise StorageUnavailableError()


# ---------------------------------------------------------------------------
# SessionClaims
# ---------------------------------------------------------------------------


class TestSessionClaims:
    def test_reads_user_id_and_lowercases_email(self):
        claims = SessionClaims.from_payload({"user_id": "u1", "email": "Ann@Example.COM"})
        assert claims.user_id == "u1"
        assert claims.email == "ann@example.com"

    def test_falls_back_to_sub(self):
        assert SessionClaims.from_payload({"sub": "abc"}).user_id == "abc"

    def test_empty_payload(self):
        assert SessionClaims.from_payload({}).is_empty


# ---------------------------------------------------------------------------
# IdentityService
# ---------------------------------------------------------------------------


class TestIdentityService:
    async def test_no_claims_is_unauthenticated(self, storage):
        service = IdentityService(storage.users)
        with pytest.raises(AuthenticationError):
            await service.resolve(None)
        with pytest.raises(AuthenticationError):
            await service.resolve(SessionClaims())

    async def test_user_id_wins_without_lookup(self):
        store = FailingUserStore()
        user_id = await IdentityService(store).resolve(SessionClaims(user_id="u1", email="a@b.c"))
        assert user_id == "u1"
        assert store.lookups == 0

    async def test_email_only_resolves_through_store(self, storage, alice):
        service = IdentityService(storage.users)
        assert await service.resolve(SessionClaims(email="alice@example.com")) == alice

    async def test_unknown_email_resolves_to_none(self, storage):
        service = IdentityService(storage.users)
        assert await service.resolve(SessionClaims(email="nobody@example.com")) is None

    async def test_lookup_failure_is_resolution_error(self):
        with pytest.raises(IdentityResolutionError):
            await IdentityService(FailingUserStore()).resolve(SessionClaims(email="a@b.c"))


# ---------------------------------------------------------------------------
# AuthService
# ---------------------------------------------------------------------------


class TestAuthService:
    async def test_signup_then_login(self, storage, settings):
        service = AuthService(storage, settings)
        user = await service.signup("New@Example.com", "  Newbie ", TEST_PASSWORD)
        assert user.email == "new@example.com"
        assert user.name == "Newbie"
        assert user.password_hash != TEST_PASSWORD

        logged_in, token, expires_in = await service.login("new@example.com", TEST_PASSWORD)
        assert logged_in.id == user.id
        assert expires_in == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

        payload = SecurityUtils.decode_access_token(token, settings.SECRET_KEY, settings.JWT_ALGORITHM)
        assert payload["user_id"] == user.id
        assert payload["email"] == "new@example.com"

    async def test_duplicate_signup_conflicts(self, storage, settings):
        service = AuthService(storage, settings)
        await service.signup("dup@example.com", "Dup", TEST_PASSWORD)
        with pytest.raises(ConflictError) as exc_info:
            await service.signup("DUP@example.com", "Dup", TEST_PASSWORD)
        assert exc_info.value.details == {"field": "email"}

    async def test_wrong_password_is_rejected(self, storage, settings):
        service = AuthService(storage, settings)
        await service.signup("pw@example.com", "Pw", TEST_PASSWORD)
        with pytest.raises(AuthenticationError):
            await service.login("pw@example.com", "Wrong$Pass1")
        with pytest.raises(AuthenticationError):
            await service.login("missing@example.com", TEST_PASSWORD)

    async def test_public_profile(self, storage, settings, alice):
        service = AuthService(storage, settings)
        user = await service.get_public_profile(alice)
        assert user.email == "alice@example.com"

    async def test_unknown_profile(self, storage, settings):
        with pytest.raises(UserNotFoundError):
            await AuthService(storage, settings).get_public_profile("missing")
