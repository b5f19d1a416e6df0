"""
Pydantic Schemas

Request and response models for the API, plus the storage records that
cross the storage port.

Schema Categories:
==================
- common: Base schemas, pagination, error and health responses
- records: Backend-agnostic storage records
- user: Signup, login and profile schemas
- content: Content schemas
- tag: Tag and top-tags schemas
- todo: Todo schemas
- search: Search result schemas

Usage:
======
    from cerebero.shared.schemas.user import SignupRequest, AuthResponse
    from cerebero.shared.schemas.common import DataResponse, ErrorResponse
"""

from cerebero.shared.schemas.common import (
    BaseSchema,
    OffsetPagination,
    MessageResponse,
    DataResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ReadinessResponse,
)
from cerebero.shared.schemas.user import (
    SignupRequest,
    LoginRequest,
    UserResponse,
    PublicUserResponse,
    SignupResponse,
    AuthResponse,
)
from cerebero.shared.schemas.content import (
    CreateContentRequest,
    UpdateContentRequest,
    ImportContentRequest,
    ContentResponse,
    SharedContentResponse,
    CreateContentResponse,
    ImportContentResponse,
    ShareStatusResponse,
    ToggleShareResponse,
    ContentByTagResponse,
)
from cerebero.shared.schemas.tag import (
    TagNameRequest,
    ContentTagRequest,
    ReplaceContentTagsRequest,
    TagResponse,
    CreateTagResponse,
    ContentTagChangeResponse,
    TopTag,
    SuggestTagsResponse,
)
from cerebero.shared.schemas.todo import (
    CreateTodoRequest,
    TodoIdRequest,
    TodoListResponse,
    TodoResponse,
)
from cerebero.shared.schemas.search import SearchResult, SearchResponse

__all__ = [
    # Common
    "BaseSchema",
    "OffsetPagination",
    "MessageResponse",
    "DataResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "ReadinessResponse",
    # User
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "PublicUserResponse",
    "SignupResponse",
    "AuthResponse",
    # Content
    "CreateContentRequest",
    "UpdateContentRequest",
    "ImportContentRequest",
    "ContentResponse",
    "SharedContentResponse",
    "CreateContentResponse",
    "ImportContentResponse",
    "ShareStatusResponse",
    "ToggleShareResponse",
    "ContentByTagResponse",
    # Tag
    "TagNameRequest",
    "ContentTagRequest",
    "ReplaceContentTagsRequest",
    "TagResponse",
    "CreateTagResponse",
    "ContentTagChangeResponse",
    "TopTag",
    "SuggestTagsResponse",
    # Todo
    "CreateTodoRequest",
    "TodoIdRequest",
    "TodoListResponse",
    "TodoResponse",
    # Search
    "SearchResult",
    "SearchResponse",
]
