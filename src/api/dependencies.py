"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.exceptions import Unauthenticated
from src.models.user import User
from src.services.auth import AuthService, authenticate_token
from src.services.post_service import PostService

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the bearer token."""
    if credentials is None:
        raise Unauthenticated("Unauthenticated.")

    user = authenticate_token(db, credentials.credentials)
    if user is None:
        raise Unauthenticated("Unauthenticated.")

    return user


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db)


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
) -> PostService:
    """Get post service with dependencies."""
    return PostService(db)
