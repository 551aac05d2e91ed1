"""SQLAlchemy models."""

from src.models.post import Post
from src.models.token import PersonalAccessToken
from src.models.user import User

__all__ = [
    "User",
    "PersonalAccessToken",
    "Post",
]
