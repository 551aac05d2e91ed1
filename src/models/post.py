"""Post model."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Post(Base, TimestampMixin):
    """Post written by a user."""

    __tablename__ = "posts"
    # sqlite_sequence only tracks AUTOINCREMENT tables
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)

    # Relationships
    user = relationship("User", back_populates="posts")
