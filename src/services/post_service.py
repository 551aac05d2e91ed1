"""Post service for CRUD and search over a user's posts."""

import logging
from typing import Any

from sqlalchemy import or_, text
from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import NotFound, PermissionDenied, UnsupportedDriver, ValidationError
from src.models.post import Post
from src.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()


def reset_auto_increment(db: Session, table: str) -> int:
    """Point the table's id sequence just past its current highest id.

    Returns the id the next insert will receive. Only MySQL/MariaDB,
    PostgreSQL and SQLite are supported.
    """
    driver = db.get_bind().dialect.name
    max_id = db.execute(text(f"SELECT MAX(id) FROM {table}")).scalar() or 0

    if driver in ("mysql", "mariadb"):
        db.execute(text(f"ALTER TABLE {table} AUTO_INCREMENT = {max_id + 1}"))
    elif driver == "postgresql":
        db.execute(
            text("SELECT setval(:sequence, :value, false)"),
            {"sequence": f"{table}_id_seq", "value": max_id + 1},
        )
    elif driver == "sqlite":
        db.execute(
            text("UPDATE sqlite_sequence SET seq = :value WHERE name = :table"),
            {"value": max_id, "table": table},
        )
    else:
        logger.error(f"Cannot reset id sequence of {table}: unsupported driver {driver}")
        raise UnsupportedDriver(f"Database driver {driver} is not supported.")

    db.commit()
    logger.info(f"Reset {table} id sequence to {max_id + 1}")
    return max_id + 1


class PostService:
    """Service for post-related operations.

    Every operation takes the authenticated user explicitly and only touches
    posts that user owns.
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_owned_post(self, post_id: int, user: User) -> Post:
        post = self.db.query(Post).filter(Post.id == post_id, Post.user_id == user.id).first()
        if not post:
            raise NotFound("Post not found")
        return post

    def create_post(self, user: User, user_id: int, title: str, body: str) -> dict[str, Any]:
        if not self.db.query(User).filter(User.id == user_id).first():
            raise ValidationError("The selected user id is invalid.")
        if user_id != user.id:
            raise PermissionDenied("You may only create posts for yourself")

        post = Post(user_id=user_id, title=title, body=body)
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)

        logger.info(f"User {user.id} created post {post.id}")
        return {"message": "Post created successfully", "post": post}

    def read_posts(self, user: User, search: str | None = None, time: str | None = None) -> dict[str, Any]:
        """List the user's posts whose title or body contains ``search``.

        ``time == "oldest"`` sorts ascending by creation; any other value,
        including None, sorts newest first.
        """
        pattern = f"%{search or ''}%"
        query = self.db.query(Post).filter(
            Post.user_id == user.id,
            or_(Post.title.like(pattern), Post.body.like(pattern)),
        )

        if time == "oldest":
            query = query.order_by(Post.created_at.asc(), Post.id.asc())
        else:
            query = query.order_by(Post.created_at.desc(), Post.id.desc())

        posts = query.all()
        if not posts:
            raise NotFound("No post found")

        return {"posts": posts}

    def update_post(self, user: User, post_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """Apply the supplied title/body; anything else is ignored."""
        post = self._get_owned_post(post_id, user)

        for field in ("title", "body"):
            if data.get(field) is not None:
                setattr(post, field, data[field])

        self.db.commit()
        self.db.refresh(post)

        logger.info(f"User {user.id} updated post {post.id}")
        return {"message": "Post updated successfully", "post": post}

    def delete_post(self, user: User, post_id: int) -> dict[str, Any]:
        post = self._get_owned_post(post_id, user)

        self.db.delete(post)
        self.db.commit()
        logger.info(f"User {user.id} deleted post {post_id}")

        if settings.recompact_post_ids:
            reset_auto_increment(self.db, Post.__tablename__)

        return {"message": "Post deleted successfully"}
