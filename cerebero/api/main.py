"""
Cerebero API Application Entry Point

FastAPI application setup with all routers, middleware, and lifecycle management.

Application Architecture:
=========================
┌─────────────────────────────────────────────────────────────────────────────┐
│                           CEREBERO API                                      │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │                    Middleware Stack                          │          │
│   │  ┌─────────────────────────────────────────────────────┐    │          │
│   │  │ CORS Middleware                                      │    │          │
│   │  │ Request Context (request id → log context)           │    │          │
│   │  │ Error Handler                                        │    │          │
│   │  └─────────────────────────────────────────────────────┘    │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                              │                                              │
│                              ▼                                              │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │                       Routers                                │          │
│   │  ┌──────┐ ┌──────┐ ┌───────┐ ┌───────┐ ┌──────┐ ┌───────┐  │          │
│   │  │Health│ │ Auth │ │Content│ │ Tags  │ │Share │ │ Todos │  │          │
│   │  └──────┘ └──────┘ └───────┘ └───────┘ └──────┘ └───────┘  │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                              │                                              │
│                              ▼                                              │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │                Dependencies (Injected)                       │          │
│   │  ┌──────────┐ ┌──────────┐ ┌──────────┐                    │          │
│   │  │ Storage  │ │   Auth   │ │ Services │                    │          │
│   │  └──────────┘ └──────────┘ └──────────┘                    │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Lifecycle:
==========
1. Application starts → lifespan startup
2. AppContext built from settings (storage backend + AI adapter)
3. Storage backend started (SQL: connectivity check, optional create_all)
4. Application serves requests
5. Application stops → lifespan shutdown
6. AI client and storage backend closed

A context passed to ``create_application`` is used as-is and its lifecycle
is left to the caller.

Usage:
======
    # Run with uvicorn
    uvicorn cerebero.api.main:app --host 0.0.0.0 --port 8000 --reload

    # Or programmatically
    from cerebero.api.main import create_application
    app = create_application()
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cerebero.api.context import AppContext
from cerebero.api.middleware import RequestContextMiddleware, setup_exception_handlers
from cerebero.api.routes import register_routes
from cerebero.config.settings import Settings, get_settings
from cerebero.shared.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup:
    - Build the application context unless one was injected
    - Start the storage backend

    Shutdown:
    - Close the AI client and the storage backend
    """
    # ═══════════════════════════════════════════════════════════════════════════
    # STARTUP
    # ═══════════════════════════════════════════════════════════════════════════
    settings: Settings = app.state.settings
    logger.info(
        "Starting Cerebero API",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        storage_backend=settings.STORAGE_BACKEND,
    )

    owned = getattr(app.state, "context", None) is None
    if owned:
        app.state.context = AppContext.from_settings(settings)
        await app.state.context.startup()

    logger.info("Cerebero API started successfully")

    yield

    # ═══════════════════════════════════════════════════════════════════════════
    # SHUTDOWN
    # ═══════════════════════════════════════════════════════════════════════════
    logger.info("Shutting down Cerebero API")

    if owned:
        await app.state.context.shutdown()
        app.state.context = None

    logger.info("Cerebero API shutdown complete")


def create_application(
    settings: Optional[Settings] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (default: from environment)
        context: Pre-built context; tests inject one with their own backend

    Returns:
        Configured FastAPI application instance

    This factory function:
    1. Creates the FastAPI app with settings
    2. Adds middleware (CORS, request context)
    3. Sets up exception handlers
    4. Registers all routes
    """
    if settings is None:
        settings = context.settings if context is not None else get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal knowledge base: save, tag, search and share content",
        version=settings.APP_VERSION,
        # Only show docs in development
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        # Use lifespan for startup/shutdown
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.context = context

    # ═══════════════════════════════════════════════════════════════════════════
    # MIDDLEWARE
    # ═══════════════════════════════════════════════════════════════════════════

    app.add_middleware(RequestContextMiddleware)

    # CORS Middleware - added last so it wraps everything
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # EXCEPTION HANDLERS
    # ═══════════════════════════════════════════════════════════════════════════

    setup_exception_handlers(app)

    # ═══════════════════════════════════════════════════════════════════════════
    # ROUTES
    # ═══════════════════════════════════════════════════════════════════════════

    register_routes(app)

    return app


# Create the application instance
app = create_application()
