"""Post API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_current_user, get_post_service
from src.models.user import User
from src.schemas.auth import MessageResponse
from src.schemas.post import PostCreate, PostListResponse, PostMessageResponse, PostUpdate
from src.services.post_service import PostService

router = APIRouter(prefix="/api/post", tags=["posts"])


@router.post("", response_model=PostMessageResponse)
async def create_post(
    post_data: PostCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Create a post owned by the current user."""
    return service.create_post(current_user, post_data.user_id, post_data.title, post_data.body)


@router.get("", response_model=PostListResponse)
async def read_posts(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
    search: Annotated[str | None, Query()] = None,
    time: Annotated[str | None, Query()] = None,
):
    """Search the current user's posts.

    Use ``time=oldest`` for oldest first; newest first otherwise.
    """
    return service.read_posts(current_user, search, time)


@router.put("/{post_id}", response_model=PostMessageResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Update the title and/or body of a post."""
    return service.update_post(current_user, post_id, post_data.model_dump(exclude_unset=True))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Delete a post."""
    return service.delete_post(current_user, post_id)
