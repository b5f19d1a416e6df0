"""
Application Context

Everything a request needs that outlives the request: settings, the storage
backend and the AI adapter. Built once at startup and stored on
``app.state.context``; handlers reach it through dependencies, never through
module globals.

Usage:
======
    context = AppContext.from_settings(settings)
    await context.startup()
    ...
    await context.shutdown()

Tests build their own context (SQLite or fake Convex backend, mocked AI
adapter) and hand it to ``create_application(context=...)``.
"""

from dataclasses import dataclass

from cerebero.config.settings import Settings
from cerebero.shared.adapters.openai_adapter import OpenAIAdapter
from cerebero.shared.backends import build_backend
from cerebero.shared.repositories.ports import StorageBackend


@dataclass
class AppContext:
    settings: Settings
    backend: StorageBackend
    ai: OpenAIAdapter

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        return cls(
            settings=settings,
            backend=build_backend(settings),
            ai=OpenAIAdapter(settings),
        )

    async def startup(self) -> None:
        await self.backend.startup()

    async def shutdown(self) -> None:
        await self.ai.close()
        await self.backend.shutdown()
