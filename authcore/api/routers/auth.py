from fastapi import APIRouter, Depends

from authcore.api.deps import get_auth_service, get_current_user
from authcore.db.models.user import User as UserModel
from authcore.schemas.user import (
    AuthResult,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    UserPublic,
)
from authcore.services.auth import AuthService

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=AuthResult)
def signup(body: SignupRequest, service: AuthService = Depends(get_auth_service)):
    """Register a new user and return a session token."""
    return service.signup(
        fullname=body.fullname,
        email=body.email,
        phone_number=body.phone_number,
        password=body.password,
        confirm_password=body.confirm_password,
    )


@router.post("/login", response_model=AuthResult)
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Login endpoint - returns a session token valid for one hour by default."""
    return service.login(email=body.email, password=body.password)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Request password reset - sends email with reset link."""
    return await service.request_password_reset(body.email)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Reset password using token from email."""
    return service.complete_password_reset(body.token, body.new_password)


@router.get("/me", response_model=UserPublic)
def get_current_user_info(current_user: UserModel = Depends(get_current_user)):
    """Get current authenticated user information."""
    return UserPublic.model_validate(current_user)
