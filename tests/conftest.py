"""
Shared pytest fixtures for Cerebero tests.

Every storage-facing test runs twice: against the SQL backend on in-memory
SQLite and against the Convex backend talking to an in-process fake
deployment. The AI adapter is replaced by a deterministic mock so no test
reaches the network.
"""

import hashlib
import re
from typing import Any, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from cerebero.api.context import AppContext
from cerebero.api.main import create_application
from cerebero.config.settings import Settings
from cerebero.shared.backends.convex import ConvexBackend
from cerebero.shared.backends.sql import SqlBackend
from cerebero.shared.core.exceptions import UpstreamUnavailableError

from fake_convex import FakeConvexDeployment


TEST_PASSWORD = "Sup3r$ecret"


class MockAIAdapter:
    """
    Deterministic stand-in for the OpenAI adapter.

    Embeddings are bags of words: each word is hashed with md5 into one of
    ``dimension`` buckets, so texts sharing words are similar and unrelated
    texts are (almost always) orthogonal.
    """

    dimension = 512

    def __init__(self, completion: str = "alpha, beta"):
        self.completion = completion
        self.fail = False
        self.embed_calls: list[str] = []
        self.complete_calls: list[tuple[str, str]] = []
        self.closed = False

    def vector(self, text: str) -> list[float]:
        embedding = [0.0] * self.dimension
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self.dimension
            embedding[bucket] += 1.0
        return embedding

    async def embed(self, text: str) -> list[float]:
        self.embed_calls.append(text)
        if self.fail:
            raise UpstreamUnavailableError("openai")
        return self.vector(text)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
    ) -> str:
        self.complete_calls.append((system_prompt, user_prompt))
        if self.fail:
            raise UpstreamUnavailableError("openai")
        return self.completion

    async def close(self) -> None:
        self.closed = True


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "APP_ENV": "test",
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "CONVEX_URL": "https://happy-otter-123.convex.cloud",
        "SECRET_KEY": "test-secret-key",
        "OPENAI_API_KEY": "",
        "SHARED_BASE_URL": "https://cerebero.test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def ai() -> MockAIAdapter:
    return MockAIAdapter()


@pytest.fixture
def deployment() -> FakeConvexDeployment:
    return FakeConvexDeployment()


def build_test_backend(name: str, settings: Settings, deployment: FakeConvexDeployment):
    if name == "sql":
        return SqlBackend(settings)
    return ConvexBackend(settings, transport=httpx.MockTransport(deployment.handle))


@pytest.fixture(params=["sql", "convex"])
async def backend(request, settings, deployment):
    """A started storage backend with an empty schema."""
    backend = build_test_backend(request.param, settings, deployment)
    if request.param == "sql":
        await backend.create_schema()
    yield backend
    await backend.shutdown()


@pytest.fixture
async def storage(backend):
    """One unit of work on the backend, open for the whole test."""
    async with backend.session() as storage:
        yield storage


@pytest.fixture
async def alice(storage) -> str:
    user = await storage.users.create("alice@example.com", "Alice", "not-a-real-hash")
    return user.id


@pytest.fixture
async def bob(storage) -> str:
    user = await storage.users.create("bob@example.com", "Bob", "not-a-real-hash")
    return user.id


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(params=["sql", "convex"])
def api_context(request, deployment, ai) -> AppContext:
    settings = make_settings(STORAGE_BACKEND=request.param, DATABASE_AUTO_CREATE=True)
    return AppContext(
        settings=settings,
        backend=build_test_backend(request.param, settings, deployment),
        ai=ai,
    )


@pytest.fixture
def client(api_context):
    """
    TestClient over an app with an injected context.

    The context is started and stopped on the client's own event loop so
    the database connection lives on the loop that serves requests.
    """
    app = create_application(context=api_context)
    with TestClient(app) as client:
        client.portal.call(api_context.startup)
        yield client
        client.portal.call(api_context.shutdown)


def signup_and_login(client: TestClient, email: str, name: str = "Test User") -> dict[str, str]:
    """Register a user and return Authorization headers for them."""
    response = client.post(
        "/auth/signup",
        json={"email": email, "name": name, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201, response.text
    response = client.post("/auth/login", json={"email": email, "password": TEST_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    return signup_and_login(client, "alice@example.com", "Alice")


@pytest.fixture
def other_headers(client) -> dict[str, str]:
    return signup_and_login(client, "bob@example.com", "Bob")
