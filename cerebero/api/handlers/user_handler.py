"""
User Handler

Public profile lookup.
"""

from fastapi import APIRouter

from cerebero.api.dependencies import AuthServiceDep
from cerebero.shared.schemas.common import DataResponse
from cerebero.shared.schemas.user import PublicUserResponse


router = APIRouter()


@router.get(
    "/{user_id}",
    response_model=DataResponse[PublicUserResponse],
)
async def get_user(
    user_id: str,
    auth_service: AuthServiceDep,
):
    """Email, name and join date of a user; 404 if unknown."""
    user = await auth_service.get_public_profile(user_id)
    return DataResponse(
        message="User fetched successfully",
        data=PublicUserResponse.model_validate(user),
    )
