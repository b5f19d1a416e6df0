"""
Authentication Handler

Handles credentials signup and login endpoints.

ARCHITECTURE:
=============
    Handler → Service → Storage port → Backend
          ↘ Utils  ↗

Handlers should ONLY:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

Business logic belongs in the SERVICE layer, not here. Service exceptions
(ConflictError 409, AuthenticationError 401) reach the client through the
global exception handlers.
"""

from fastapi import APIRouter, status

from cerebero.api.dependencies import AuthServiceDep
from cerebero.shared.schemas.user import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    SignupResponse,
    UserResponse,
)


router = APIRouter()


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    user_data: SignupRequest,
    auth_service: AuthServiceDep,
):
    """
    Register a new credentials user.

    Raises:
        400: If email, name or password fail validation
        409: If the email is already registered
    """
    user = await auth_service.signup(
        email=user_data.email,
        name=user_data.name,
        password=user_data.password,
    )
    return SignupResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
):
    """
    Authenticate user and return a bearer token.

    Raises:
        401: If credentials are invalid
    """
    user, access_token, expires_in = await auth_service.login(
        email=credentials.email,
        password=credentials.password,
    )
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        expires_in=expires_in,
    )
