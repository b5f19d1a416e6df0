"""
Error Handler Middleware

Global exception handling for the API.

Provides consistent error responses across all endpoints by catching
exceptions and converting them to standardized JSON responses.

Error Response Format:
======================
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Content with id 'abc-123' not found",
            "details": {}
        }
    }

Exception Handling:
===================
1. CereberoException subclasses → Use their status_code and to_dict()
2. Request validation errors (body, query, path) → 400 with field details
3. Other exceptions → 500 with generic message (details hidden)

Usage:
======
    from cerebero.api.middleware.error_handler import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from cerebero.shared.core.exceptions import CereberoException
from cerebero.shared.core.logging import logger


def _field_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Reduce pydantic error entries to field, message and type."""
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]


def _validation_response(errors: list[dict[str, Any]]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": {"errors": jsonable_encoder(_field_errors(errors))},
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Set up global exception handlers.

    Should be called during application initialization to register
    exception handlers for all routes.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(CereberoException)
    async def cerebero_exception_handler(
        request: Request,
        exc: CereberoException,
    ) -> JSONResponse:
        """
        Handle application exceptions.

        Server-side failures (storage, upstream AI, identity lookup) are
        logged as errors; client errors as warnings.
        """
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "application_error",
            error_code=exc.error_code,
            message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """
        Handle malformed requests.

        FastAPI would answer 422; this API reports validation failures as 400.
        """
        logger.warning(
            "request_validation_error",
            errors=_field_errors(list(exc.errors())),
            path=request.url.path,
        )
        return _validation_response(list(exc.errors()))

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: ValidationError,
    ) -> JSONResponse:
        """Handle pydantic validation errors raised inside handlers."""
        logger.warning(
            "validation_error",
            errors=_field_errors(exc.errors()),
            path=request.url.path,
        )
        return _validation_response(exc.errors())

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Handle unexpected exceptions.

        Catches any unhandled exception and returns a generic error.
        Full error details are logged but not exposed to clients.
        """
        logger.error(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "details": {},
                }
            },
        )
