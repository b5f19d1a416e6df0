"""
Content Handler

Handles content CRUD, toggles, sharing, import, search and content tags.

ARCHITECTURE:
=============
    Handler → Service → Storage port → Backend

Handlers should ONLY:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

Business logic belongs in the SERVICE layer. Ownership is enforced there:
content owned by another user answers 404.

Route order matters: the fixed paths (/favourites, /search, /import) are
declared before /{content_id}.
"""

from typing import Optional, Union

from fastapi import APIRouter, Query, status

from cerebero.api.dependencies import (
    ContentServiceDep,
    CurrentUserId,
    SearchServiceDep,
    TagServiceDep,
)
from cerebero.shared.schemas.common import DataResponse, MessageResponse
from cerebero.shared.schemas.content import (
    ContentResponse,
    CreateContentRequest,
    CreateContentResponse,
    ImportContentRequest,
    ImportContentResponse,
    ShareStatusResponse,
    ToggleShareResponse,
    UpdateContentRequest,
)
from cerebero.shared.schemas.search import SearchResponse, SearchResult
from cerebero.shared.schemas.tag import (
    ContentTagChangeResponse,
    ContentTagRequest,
    ReplaceContentTagsRequest,
    TagResponse,
)


router = APIRouter()


def _content(record) -> ContentResponse:
    return ContentResponse.model_validate(record)


# ═══════════════════════════════════════════════════════════════════════════════
# COLLECTION
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "",
    response_model=CreateContentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_content(
    request: CreateContentRequest,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    """
    Save new content for the authenticated user.

    Tags are get-or-created and attached; the embedding used by AI search
    is generated in the same request. Neither step can fail the save;
    failed steps are listed in ``warnings``.
    """
    outcome = await content_service.create(
        user_id,
        title=request.title,
        type=request.type,
        url=request.url,
        body=request.body,
        tags=request.tags,
    )
    return CreateContentResponse(
        message="Content added successfully",
        content_id=outcome.primary.id,
        share_id=outcome.primary.share_id,
        tags=[tag.name for tag in outcome.tags],
        warnings=[effect.name for effect in outcome.failures],
    )


@router.get(
    "",
    response_model=DataResponse[Union[ContentResponse, list[ContentResponse]]],
)
async def get_content(
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
    id: Optional[str] = Query(None, description="Fetch one item instead of the list"),
):
    """
    List the user's content, most recently updated first.

    With ``?id=`` returns that single item (404 if absent or not owned).
    An empty collection is a 200 with an empty list.
    """
    if id is not None:
        record = await content_service.get(user_id, id)
        return DataResponse(message="Content fetched successfully", data=_content(record))

    records = await content_service.list_by_user(user_id)
    return DataResponse(
        message="Content fetched successfully",
        data=[_content(record) for record in records],
    )


@router.get(
    "/favourites",
    response_model=DataResponse[list[ContentResponse]],
)
async def list_favourites(
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    records = await content_service.list_favourites(user_id)
    return DataResponse(
        message="Favourites fetched successfully",
        data=[_content(record) for record in records],
    )


@router.get(
    "/search",
    response_model=SearchResponse,
)
async def search_content(
    user_id: CurrentUserId,
    search_service: SearchServiceDep,
    q: str = Query("", description="Search text"),
    ai: bool = Query(False, description="Use semantic (embedding) search"),
):
    """
    Search content and tags.

    Text mode returns content matches first, then tag matches. AI mode
    returns semantically similar content only and degrades to an empty
    result if the AI provider is unavailable.
    """
    hits = await search_service.search(user_id, q, use_ai=ai)
    return SearchResponse(results=[SearchResult.model_validate(hit) for hit in hits])


@router.post(
    "/import",
    response_model=ImportContentResponse,
)
async def import_content(
    request: ImportContentRequest,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    """Import a batch of items. One invalid item rejects the whole batch."""
    count = await content_service.import_content(
        user_id,
        [item.model_dump() for item in request.content],
    )
    return ImportContentResponse(
        message=f"Successfully imported {count} items",
        count=count,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SINGLE ITEM
# ═══════════════════════════════════════════════════════════════════════════════


@router.get(
    "/{content_id}",
    response_model=DataResponse[ContentResponse],
)
async def get_content_by_id(
    content_id: str,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    record = await content_service.get(user_id, content_id)
    return DataResponse(message="Content fetched successfully", data=_content(record))


@router.put(
    "/{content_id}",
    response_model=DataResponse[ContentResponse],
)
async def edit_content(
    content_id: str,
    request: UpdateContentRequest,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    record = await content_service.edit(
        user_id,
        content_id,
        title=request.title,
        type=request.type,
        url=request.url,
        body=request.body,
    )
    return DataResponse(message="Content updated successfully", data=_content(record))


@router.delete(
    "/{content_id}",
    response_model=MessageResponse,
)
async def delete_content(
    content_id: str,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    """Delete an item together with its tag links and embedding."""
    await content_service.delete(user_id, content_id)
    return MessageResponse(message="Content deleted successfully")


@router.patch(
    "/{content_id}/favourite",
    response_model=DataResponse[ContentResponse],
)
async def toggle_favourite(
    content_id: str,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    record = await content_service.toggle_favourite(user_id, content_id)
    message = "Added to favourites" if record.is_favourite else "Removed from favourites"
    return DataResponse(message=message, data=_content(record))


@router.patch(
    "/{content_id}/share",
    response_model=ToggleShareResponse,
)
async def toggle_share(
    content_id: str,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    record = await content_service.toggle_share(user_id, content_id)
    return ToggleShareResponse(
        message="Content shared" if record.is_shared else "Content unshared",
        data=_content(record),
        share_url=content_service.share_url(record),
    )


@router.get(
    "/{content_id}/share",
    response_model=ShareStatusResponse,
)
async def get_share_status(
    content_id: str,
    user_id: CurrentUserId,
    content_service: ContentServiceDep,
):
    share = await content_service.share_status(user_id, content_id)
    return ShareStatusResponse(
        is_shared=share.is_shared,
        share_id=share.share_id,
        share_url=share.share_url,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# CONTENT TAGS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get(
    "/{content_id}/tags",
    response_model=DataResponse[list[TagResponse]],
)
async def list_content_tags(
    content_id: str,
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    tags = await tag_service.list_for_content(user_id, content_id)
    return DataResponse(
        message="Tags fetched successfully",
        data=[TagResponse.model_validate(tag) for tag in tags],
    )


@router.put(
    "/{content_id}/tags",
    response_model=DataResponse[list[TagResponse]],
)
async def replace_content_tags(
    content_id: str,
    request: ReplaceContentTagsRequest,
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    """Replace the item's whole tag set with the given names."""
    tags = await tag_service.replace_for_content(user_id, content_id, request.tags)
    return DataResponse(
        message="Tags updated successfully",
        data=[TagResponse.model_validate(tag) for tag in tags],
    )


@router.post(
    "/{content_id}/tags",
    response_model=ContentTagChangeResponse,
)
async def attach_tag(
    content_id: str,
    request: ContentTagRequest,
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    """Attach an owned tag. 409 if it is already attached."""
    await tag_service.attach(user_id, content_id, request.tag_id)
    return ContentTagChangeResponse(message="Tag attached to content", status="attached")


@router.delete(
    "/{content_id}/tags",
    response_model=ContentTagChangeResponse,
)
async def detach_tag(
    content_id: str,
    request: ContentTagRequest,
    user_id: CurrentUserId,
    tag_service: TagServiceDep,
):
    """Detach a tag. Detaching a tag that is not attached still succeeds."""
    removed = await tag_service.detach(user_id, content_id, request.tag_id)
    if removed:
        return ContentTagChangeResponse(message="Tag removed from content", status="detached")
    return ContentTagChangeResponse(message="Tag was not attached", status="missing")
