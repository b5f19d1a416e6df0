"""
Share Handler

Public, unauthenticated access to shared content by share id. An item is
only visible while it is shared; unsharing makes its link answer 404 even
though the id is kept for a later re-share.
"""

from fastapi import APIRouter

from cerebero.api.dependencies import ContentServiceDep
from cerebero.shared.schemas.common import DataResponse
from cerebero.shared.schemas.content import SharedContentResponse


router = APIRouter()


@router.get(
    "/{share_id}",
    response_model=DataResponse[SharedContentResponse],
)
async def get_shared_content(
    share_id: str,
    content_service: ContentServiceDep,
):
    record = await content_service.get_shared(share_id)
    return DataResponse(
        message="Shared content fetched successfully",
        data=SharedContentResponse.model_validate(record),
    )
