"""
Blog Backend: Persistence Gateway
==================================

What:  The only component that issues storage queries. Translates typed
       read/write calls into SQLAlchemy statements against Author and Post.
How:   Holds the request's AsyncSession. Reads eager-load the author so the
       joined view can be serialized after the session closes. Writes commit
       immediately (one statement, one transaction).
Who:   Injected into route handlers via `get_post_gateway`; used directly by
       the seed command.

Error Handling Strategy:
    Expected outcomes are raised as typed errors:
        no such post           → NotFoundError          (ErrorKind.NOT_FOUND)
        no such author on write → ReferenceNotFoundError (ErrorKind.REFERENCE_NOT_FOUND)
        duplicate author email → ConflictError          (ErrorKind.CONFLICT)
    Anything else raised by SQLAlchemy or the driver is logged with its
    traceback and re-raised as DatabaseError (ErrorKind.SYSTEM_FAILURE),
    carrying only the original exception type name in its context.
"""

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog_app.database import get_db_session
from blog_app.exceptions import (
    BlogAppError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ReferenceNotFoundError,
)
from blog_app.models import Author, Post

logger = logging.getLogger(__name__)

# Primary keys are 32-bit INTEGER columns (int4 on PostgreSQL)
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1


def id_in_range(value: int) -> bool:
    """True when `value` fits the id column; anything else cannot match a row."""
    return ID_MIN <= value <= ID_MAX


class PostGateway:
    """
    Typed persistence operations for posts and authors.

    Operations:
        - find_post_by_id(): single post joined with its author
        - list_posts(): every post, newest first, joined with authors
        - create_post(): insert one post after checking the author exists
        - create_author(): insert one author with a unique email

    The gateway keeps no state besides the session it was built with; build
    a new one per request.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_post_by_id(self, post_id: int) -> Post:
        """
        Fetch one post with its author.

        Raises:
            NotFoundError: no post has this id
            DatabaseError: the query failed
        """
        if not id_in_range(post_id):
            raise NotFoundError(resource="post", resource_id=post_id)

        try:
            result = await self.session.execute(
                select(Post)
                .options(selectinload(Post.author))
                .where(Post.id == post_id)
            )
            post = result.scalar_one_or_none()
        except Exception as e:
            raise self._system_failure("find_post_by_id", e, post_id=post_id)

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post

    async def list_posts(self) -> List[Post]:
        """
        Every post, ordered by created_at descending, each with its author.

        Ties on created_at fall back to id descending. An empty table yields
        an empty list.
        """
        try:
            result = await self.session.execute(
                select(Post)
                .options(selectinload(Post.author))
                .order_by(desc(Post.created_at), desc(Post.id))
            )
            return list(result.scalars().all())
        except Exception as e:
            raise self._system_failure("list_posts", e)

    async def create_post(
        self,
        title: str,
        content: str,
        author_id: int,
        published: bool = False,
    ) -> Post:
        """
        Persist one new post and return the raw record (author not loaded).

        The author is looked up first; a missing author means no row is written.

        Raises:
            ReferenceNotFoundError: author_id matches no Author
            DatabaseError: the insert or commit failed
        """
        if not id_in_range(author_id):
            raise ReferenceNotFoundError(resource="author", resource_id=author_id)

        try:
            author = await self.session.get(Author, author_id)
            if author is None:
                raise ReferenceNotFoundError(resource="author", resource_id=author_id)

            post = Post(
                title=title,
                content=content,
                published=published,
                author_id=author_id,
            )
            self.session.add(post)
            await self.session.commit()
            logger.info("Post %s created by author %s", post.id, author_id)
            return post

        except BlogAppError:
            raise
        except IntegrityError as e:
            # Author removed between the lookup and the insert
            await self.session.rollback()
            logger.warning("Foreign key rejected post for author %s: %s", author_id, str(e.orig))
            raise ReferenceNotFoundError(resource="author", resource_id=author_id)
        except Exception as e:
            await self.session.rollback()
            raise self._system_failure("create_post", e, author_id=author_id)

    async def create_author(self, name: str, email: str) -> Author:
        """
        Persist one new author.

        Raises:
            ConflictError: the email is already registered
            DatabaseError: the insert or commit failed
        """
        try:
            existing = await self.session.execute(
                select(Author.id).where(Author.email == email)
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    message=f"An author with email '{email}' already exists",
                    context={"email": email},
                )

            author = Author(name=name, email=email)
            self.session.add(author)
            await self.session.commit()
            logger.info("Author %s created (%s)", author.id, email)
            return author

        except BlogAppError:
            raise
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(
                message=f"An author with email '{email}' already exists",
                context={"email": email},
            )
        except Exception as e:
            await self.session.rollback()
            raise self._system_failure("create_author", e)

    @staticmethod
    def _system_failure(operation: str, error: Exception, **context: Optional[int]) -> DatabaseError:
        logger.error(
            "Database error in %s: %s",
            operation,
            str(error),
            exc_info=error,
        )
        return DatabaseError(
            context={"operation": operation, "original_error": type(error).__name__, **context},
        )


def get_post_gateway(db: AsyncSession = Depends(get_db_session)) -> PostGateway:
    """FastAPI dependency: a gateway bound to this request's session."""
    return PostGateway(db)
