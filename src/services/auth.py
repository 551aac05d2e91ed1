"""Authentication service for password and personal access token handling."""

import hashlib
import hmac
import logging
import secrets
from datetime import UTC, datetime

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import AlreadyLoggedIn, InvalidCredential, NotFound, Unauthenticated, ValidationError
from src.models.token import PersonalAccessToken
from src.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode()).hexdigest()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def create_token(db: Session, user: User, name: str | None = None) -> str:
    """Persist a new token for the user and return its plain-text form.

    The plain-text value is ``"<id>|<secret>"`` and is never stored. Raises
    ``IntegrityError`` when the user already holds a token with this name.
    """
    secret = secrets.token_urlsafe(settings.token_bytes)
    token = PersonalAccessToken(
        user_id=user.id,
        name=name or settings.token_name,
        token=hash_token(secret),
    )
    db.add(token)
    db.commit()
    db.refresh(token)
    return f"{token.id}|{secret}"


def find_token(db: Session, plain_token: str) -> PersonalAccessToken | None:
    """Resolve a plain-text bearer token to its stored record."""
    if "|" not in plain_token:
        return (
            db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.token == hash_token(plain_token))
            .first()
        )

    token_id, secret = plain_token.split("|", 1)
    # ids must fit a 64-bit integer column
    if not (token_id.isascii() and token_id.isdigit()) or len(token_id) > 18:
        return None

    token = db.query(PersonalAccessToken).filter(PersonalAccessToken.id == int(token_id)).first()
    if token is None or not hmac.compare_digest(token.token, hash_token(secret)):
        return None
    return token


def authenticate_token(db: Session, plain_token: str) -> User | None:
    """Return the owner of a valid token, stamping its last use."""
    token = find_token(db, plain_token)
    if token is None:
        return None

    token.last_used_at = datetime.now(UTC)
    db.commit()
    return token.user


class AuthService:
    """Registration, login, profile and logout."""

    def __init__(self, db: Session):
        self.db = db

    def register(self, name: str, email: str, password: str) -> dict:
        """Create a user and log them straight in."""
        if get_user_by_email(self.db, email):
            raise ValidationError("The email has already been taken.")

        user = User(name=name, email=email, password_hash=get_password_hash(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("The email has already been taken.") from None
        self.db.refresh(user)

        token = create_token(self.db, user)
        logger.info(f"Registered user {user.id}")

        return {"message": "Register successful", "token": token}

    def login(self, email: str, password: str) -> dict:
        """Issue a token, refusing when the user already holds one."""
        user = get_user_by_email(self.db, email)
        if not user:
            raise NotFound("User not found")

        if not verify_password(password, user.password_hash):
            logger.info(f"Rejected login for user {user.id}: bad password")
            raise InvalidCredential("Password incorrect")

        existing = (
            self.db.query(PersonalAccessToken)
            .filter(
                PersonalAccessToken.user_id == user.id,
                PersonalAccessToken.name == settings.token_name,
            )
            .first()
        )
        if existing:
            raise AlreadyLoggedIn("User is already logged in")

        try:
            token = create_token(self.db, user)
        except IntegrityError:
            # A concurrent login inserted the token first
            self.db.rollback()
            raise AlreadyLoggedIn("User is already logged in") from None

        logger.info(f"User {user.id} logged in")
        return {"message": "Login successful", "token": token}

    def profile(self, user: User | None) -> dict:
        if user is None:
            raise Unauthenticated("User not authenticated")
        return {"data": user}

    def logout(self, user: User | None) -> dict:
        """Delete every token held by the user."""
        if user is None:
            raise Unauthenticated("User not authenticated")

        deleted = (
            self.db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.user_id == user.id)
            .delete(synchronize_session=False)
        )
        self.db.commit()

        if not deleted:
            raise Unauthenticated("User not authenticated")

        logger.info(f"User {user.id} logged out")
        return {"message": "Logout successful"}
