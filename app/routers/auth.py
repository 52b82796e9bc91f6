"""Authentication API endpoints."""

from fastapi import APIRouter, Depends

from app.dependencies import (
    CurrentUser,
    RefreshPrincipal,
    get_auth_service,
    get_current_user,
    get_refresh_principal,
)
from app.schemas.auth import (
    AuthRequest,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupResponse,
    TokenPair,
)
from app.schemas.user import UserProfile
from app.services.auth import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(body: AuthRequest, auth: AuthService = Depends(get_auth_service)) -> SignupResponse:
    """Register a new account and receive a token pair."""
    return auth.signup(body.email, body.password)


@router.post("/signin", response_model=TokenPair)
def signin(body: AuthRequest, auth: AuthService = Depends(get_auth_service)) -> TokenPair:
    """Authenticate and receive a token pair."""
    return auth.signin(body.email, body.password)


@router.post("/logout")
def logout(
    user: CurrentUser = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> bool:
    """Invalidate the caller's refresh token."""
    return auth.logout(user.user_id)


@router.post("/refresh", response_model=TokenPair)
def refresh(
    principal: RefreshPrincipal = Depends(get_refresh_principal),
    auth: AuthService = Depends(get_auth_service),
) -> TokenPair:
    """Exchange the refresh token in the Authorization header for a new pair."""
    return auth.refresh_tokens(principal.user_id, principal.refresh_token)


@router.patch("/change-password", response_model=UserProfile)
def change_password(
    body: ChangePasswordRequest,
    user: CurrentUser = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> UserProfile:
    """Change the caller's password."""
    return auth.change_password(user.user_id, body.current_password, body.new_password)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(body: ForgotPasswordRequest, auth: AuthService = Depends(get_auth_service)) -> MessageResponse:
    """Request a password reset email. Same answer whether or not the account exists."""
    return MessageResponse(**auth.forgot_password(body.email))


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordRequest, auth: AuthService = Depends(get_auth_service)) -> MessageResponse:
    """Set a new password using a reset token."""
    auth.reset_password(body.token, body.new_password)
    return MessageResponse(message="Password updated")
