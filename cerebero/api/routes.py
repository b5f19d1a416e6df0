"""
Route Registration

Centralizes all route registration for the FastAPI application.

Route Hierarchy:
================
    /health, /ready, /live  → Health check endpoints
    /auth                   → Signup and login
    /users                  → Public profiles
    /content                → Content CRUD, toggles, import, search, content tags
    /tags                   → Tag CRUD, top tags, suggestions, content by tag
    /share                  → Public shared content (no auth)
    /todos                  → Todo list

Usage:
======
    from cerebero.api.routes import register_routes

    app = FastAPI()
    register_routes(app)
"""

from fastapi import FastAPI

from cerebero.api.handlers import (
    auth_handler,
    content_handler,
    health_handler,
    share_handler,
    tag_handler,
    todo_handler,
    user_handler,
)


def register_routes(app: FastAPI) -> None:
    """
    Register all API routes.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, root level)
    app.include_router(
        health_handler.router,
        tags=["Health"],
    )

    app.include_router(
        auth_handler.router,
        prefix="/auth",
        tags=["Authentication"],
    )

    app.include_router(
        user_handler.router,
        prefix="/users",
        tags=["Users"],
    )

    app.include_router(
        content_handler.router,
        prefix="/content",
        tags=["Content"],
    )

    app.include_router(
        tag_handler.router,
        prefix="/tags",
        tags=["Tags"],
    )

    app.include_router(
        share_handler.router,
        prefix="/share",
        tags=["Sharing"],
    )

    app.include_router(
        todo_handler.router,
        prefix="/todos",
        tags=["Todos"],
    )
