"""Personal access token model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class PersonalAccessToken(Base, TimestampMixin):
    """Bearer token issued at register/login.

    Only the SHA-256 digest of the secret is stored. A user holds at most one
    token per name, which is what keeps a second login from succeeding.
    """

    __tablename__ = "personal_access_tokens"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_tokens_user_name"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    token = Column(String(64), unique=True, nullable=False)
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="tokens")
