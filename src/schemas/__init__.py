"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    MessageResponse,
    ProfileResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.schemas.post import (
    PostCreate,
    PostListResponse,
    PostMessageResponse,
    PostResponse,
    PostUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "TokenResponse",
    "UserResponse",
    "ProfileResponse",
    "MessageResponse",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostMessageResponse",
    "PostListResponse",
]
