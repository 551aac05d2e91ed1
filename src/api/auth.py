"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_auth_service, get_current_user
from src.models.user import User
from src.schemas.auth import (
    MessageResponse,
    ProfileResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.services.auth import AuthService

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=TokenResponse)
async def register(
    user_data: UserRegister,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user and return their first token."""
    return service.register(user_data.name, user_data.email, user_data.password)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    return service.login(credentials.email, credentials.password)


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    result = service.profile(current_user)
    return ProfileResponse(profile=UserResponse.model_validate(result["data"]))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Revoke every token of the current user."""
    return service.logout(current_user)
