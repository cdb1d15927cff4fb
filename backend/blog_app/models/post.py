"""
Blog Backend: Post SQLAlchemy Model
====================================

What:  ORM model for the `posts` table.
Who:   Written and read exclusively by PostGateway.

Table Design:
    - Integer primary key, generated by the database, never reused
    - published defaults to false on both the Python and the server side
    - created_at is set once at insert time and never updated (no onupdate)
    - author_id is a required foreign key to authors.id

Index on created_at DESC:
    Serves the only list query, `ORDER BY created_at DESC`.

Query Patterns:
    - List: SELECT ... ORDER BY created_at DESC, id DESC  (author eager-loaded)
    - Detail: SELECT ... WHERE id = :id                  (author eager-loaded)
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_app.database import Base

if TYPE_CHECKING:
    from blog_app.models.author import Author


class Post(Base):
    """
    A blog post owned by exactly one Author.

    Lifecycle:
        Created by POST /posts, read by GET /posts and GET /posts/{id}.
        There is no update or delete operation.
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    # UTC with timezone; serialized as createdAt
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("authors.id"),
        nullable=False,
    )

    author: Mapped["Author"] = relationship(back_populates="posts")

    # SQLite only: AUTOINCREMENT so ids of removed rows are never handed out again
    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<Post(id={self.id}, author_id={self.author_id}, "
            f"published={self.published}, created_at='{self.created_at}')>"
        )
