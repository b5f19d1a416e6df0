"""
Tag Handler

Handles tag CRUD, the top-tags view, tag suggestions and content-by-tag.
"""

from fastapi import APIRouter, Query, Response, status

from cerebero.api.dependencies import ContentServiceDep, CurrentUserId, TagServiceDep
from cerebero.shared.schemas.common import DataResponse, MessageResponse, OffsetPagination
from cerebero.shared.schemas.content import ContentByTagResponse, ContentResponse
from cerebero.shared.schemas.tag import (
    CreateTagResponse,
    SuggestTagsResponse,
    TagNameRequest,
    TagResponse,
    TopTag,
    TopTagContent,
)
from cerebero.shared.services.content_service import DEFAULT_PAGE_LIMIT
from cerebero.shared.services.tag_service import (
    DEFAULT_TOP_CONTENT_LIMIT,
    DEFAULT_TOP_TAG_LIMIT,
)


router = APIRouter()


@router.get(
    "",
    response_model=DataResponse[list[TagResponse]],
)
async def list_tags(
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    """All of the user's tags, by name."""
    tags = await tag_service.list_by_user(user_id)
    return DataResponse(
        message="Tags fetched successfully",
        data=[TagResponse.model_validate(tag) for tag in tags],
    )


@router.post(
    "",
    response_model=CreateTagResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_tag(
    request: TagNameRequest,
    response: Response,
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    """
    Create a tag, or return the existing one with the same normalised name
    (200 instead of 201).
    """
    tag, created = await tag_service.get_or_create(user_id, request.name)
    if not created:
        response.status_code = status.HTTP_200_OK
    return CreateTagResponse(
        message="Tag created successfully" if created else "Tag already exists",
        data=TagResponse.model_validate(tag),
        created=created,
    )


@router.get(
    "/top-with-content",
    response_model=DataResponse[list[TopTag]],
)
async def top_tags_with_content(
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
    tag_limit: int = Query(DEFAULT_TOP_TAG_LIMIT, alias="tagLimit"),
    content_limit: int = Query(DEFAULT_TOP_CONTENT_LIMIT, alias="contentLimit"),
):
    """
    Most used tags with their most recently tagged content.

    Both limits must be positive; values above 20 are clamped.
    """
    summaries = await tag_service.top_with_content(
        user_id,
        tag_limit=tag_limit,
        content_limit=content_limit,
    )
    return DataResponse(
        message="Top tags fetched successfully",
        data=[
            TopTag(
                tag_id=summary.tag.id,
                tag_name=summary.tag.name,
                usage_count=summary.usage_count,
                content=[
                    TopTagContent(
                        id=item.id,
                        title=item.title,
                        url=item.url,
                        created_at=item.created_at,
                        updated_at=item.updated_at,
                    )
                    for item in summary.content
                ],
            )
            for summary in summaries
        ],
    )


@router.get(
    "/suggest",
    response_model=SuggestTagsResponse,
)
async def suggest_tags(
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
    title: str = Query("", description="Title to suggest tags for"),
):
    """Ask the AI provider for 2 to 3 single-word tags."""
    tags = await tag_service.suggest(title)
    return SuggestTagsResponse(tags=tags)


@router.get(
    "/{tag_name}/content",
    response_model=ContentByTagResponse,
)
async def list_content_by_tag(
    tag_name: str,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
    limit: int = Query(DEFAULT_PAGE_LIMIT, description="Page size"),
    offset: int = Query(0, description="Items to skip"),
):
    tag, page = await content_service.list_by_tag(user_id, tag_name, limit=limit, offset=offset)
    return ContentByTagResponse(
        tag=tag.name,
        content=[ContentResponse.model_validate(item) for item in page.items],
        pagination=OffsetPagination.create(total=page.total, limit=limit, offset=offset),
    )


@router.put(
    "/{tag_id}",
    response_model=DataResponse[TagResponse],
)
async def rename_tag(
    tag_id: str,
    request: TagNameRequest,
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    """Rename a tag. 409 if another of the user's tags already has the name."""
    tag = await tag_service.rename(user_id, tag_id, request.name)
    return DataResponse(message="Tag updated successfully", data=TagResponse.model_validate(tag))


@router.delete(
    "/{tag_id}",
    response_model=MessageResponse,
)
async def delete_tag(
    tag_id: str,
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    await tag_service.delete(user_id, tag_id)
    return MessageResponse(message="Tag deleted successfully")
