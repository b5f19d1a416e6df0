"""
Common Schemas

Shared schemas used across the application for consistent API responses.

Schema Types:
=============
- BaseSchema: Base with common config (from_attributes, populate_by_name)
- Pagination: offset/limit metadata for list-by-tag
- Generic Responses: DataResponse[T], MessageResponse, ErrorResponse
- Health: HealthResponse, ReadinessResponse

Usage:
======
    from cerebero.shared.schemas.common import DataResponse, MessageResponse

    return DataResponse[list[TagResponse]](message="Tags fetched", data=tags)
"""

from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


DataT = TypeVar("DataT")


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    - from_attributes: build from records and ORM rows
    - populate_by_name: accept both field names and aliases
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# PAGINATION
# ═══════════════════════════════════════════════════════════════════════════════


class OffsetPagination(BaseSchema):
    """
    Offset pagination metadata.

    ``hasMore`` keeps its camelCase wire name for existing clients.
    """

    total: int = Field(description="Total number of items")
    limit: int = Field(description="Page size requested")
    offset: int = Field(description="Items skipped")
    has_more: bool = Field(alias="hasMore", description="offset + limit < total")

    @classmethod
    def create(cls, total: int, limit: int, offset: int) -> "OffsetPagination":
        return cls(total=total, limit=limit, offset=offset, has_more=offset + limit < total)


# ═══════════════════════════════════════════════════════════════════════════════
# STANDARD RESPONSES
# ═══════════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Simple message response for success confirmations."""

    message: str


class DataResponse(BaseModel, Generic[DataT]):
    """Message plus payload; the shape every read endpoint returns."""

    message: str
    data: DataT


class ErrorDetail(BaseModel):
    """Error detail structure in error responses."""

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(
        default=None,
        description="Additional error context",
    )


class ErrorResponse(BaseModel):
    """
    Standard error response schema.

    Example:
        {
            "error": {
                "code": "NOT_FOUND",
                "message": "Content with id 'abc-123' not found",
                "details": {}
            }
        }
    """

    error: ErrorDetail


# ═══════════════════════════════════════════════════════════════════════════════
# HEALTH CHECK
# ═══════════════════════════════════════════════════════════════════════════════


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = "healthy"
    service: str = "cerebero"
    version: str = "1.0.0"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ReadinessResponse(BaseModel):
    status: str
    storage_backend: str
    storage: bool
