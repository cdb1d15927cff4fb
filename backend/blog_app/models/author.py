"""
Blog Backend: Author SQLAlchemy Model
======================================

What:  ORM model for the `authors` table.
Who:   Referenced by Post.author_id; created by the seed command through the gateway.

Table Design:
    - Integer primary key, generated by the database, never reused
    - email is unique (enforced by a unique index)
    - No delete path exists; the posts foreign key keeps the database's
      default referential action
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_app.database import Base

if TYPE_CHECKING:
    from blog_app.models.post import Post


class Author(Base):
    """A person who writes posts. One Author has many Posts."""

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    posts: Mapped[List["Post"]] = relationship(back_populates="author")

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, email='{self.email}')>"
