"""
Health Check Handler

Provides health check endpoints for monitoring and load balancers.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cerebero.api.dependencies import Context
from cerebero.shared.schemas.common import HealthResponse, ReadinessResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(context: Context):
    """
    Basic health check endpoint.

    Returns:
        HealthResponse with service status
    """
    return HealthResponse(
        status="healthy",
        service=context.settings.APP_NAME.lower(),
        version=context.settings.APP_VERSION,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(context: Context):
    """
    Readiness check for Kubernetes/load balancers.

    Pings the storage backend; answers 503 while it is unreachable.
    """
    storage_ok = await context.backend.ping()
    body = ReadinessResponse(
        status="ready" if storage_ok else "not_ready",
        storage_backend=context.backend.name,
        storage=storage_ok,
    )
    if not storage_ok:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body


@router.get("/live")
async def liveness_check():
    """
    Liveness check for Kubernetes.

    Returns:
        Simple alive status
    """
    return {"status": "alive"}
