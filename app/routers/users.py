"""
User and session API endpoints.
Provides registration, username/password login, Google login and user lookup.
"""

from fastapi import APIRouter, Depends, Path, status

from app.services.auth import AuthService
from app.services.identity import GoogleIdentityVerifier
from app.schemas.user import UserCreate, UserResponse, UserEnvelope
from app.schemas.auth import LoginRequest, GoogleLoginRequest, SessionResponse
from app.schemas.error import error_responses
from app.utils.dependencies import get_auth_service, get_identity_verifier
from app.utils.validators import MAX_ID


router = APIRouter(tags=["Users"])


@router.post(
    "/users",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Register user",
    description="Create a user account with a unique username and email",
    responses=error_responses(400, 409, 500)
)
async def register_user(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
) -> UserEnvelope:
    """
    Register a new user.

    Raises:
        DuplicateResourceError: If the username or email is already taken
    """
    user = await auth_service.register_user(user_data)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post(
    "/session",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with username and password",
    responses=error_responses(400, 401, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionResponse:
    """
    Authenticate user and return the user's public profile.

    Raises:
        InvalidCredentialsError: If credentials are invalid
    """
    user = await auth_service.authenticate(login_data)
    return SessionResponse(user=UserResponse.model_validate(user))


@router.post(
    "/google-login",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Google login",
    description="Authenticate with a Google ID token; the account is created on first login",
    responses=error_responses(400, 500)
)
async def google_login(
    login_data: GoogleLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier)
) -> SessionResponse:
    user = await auth_service.google_login(login_data.id_token, verifier)
    return SessionResponse(user=UserResponse.model_validate(user))


@router.get(
    "/users/{user_id}",
    response_model=UserEnvelope,
    summary="Get user",
    description="Retrieve a user's public profile by ID",
    responses=error_responses(400, 404, 500)
)
async def get_user(
    user_id: int = Path(..., ge=1, le=MAX_ID, description="User ID"),
    auth_service: AuthService = Depends(get_auth_service)
) -> UserEnvelope:
    user = await auth_service.get_user(user_id)
    return UserEnvelope(user=UserResponse.model_validate(user))
