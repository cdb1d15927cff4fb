"""
Blog Backend: Posts Route Handlers
===================================

What:  GET /posts (list), POST /posts (create), GET /posts/{post_id} (detail).
How:   Each handler validates its input, delegates to PostGateway, and returns
       the result. Failures are raised as typed application errors and turned
       into responses by the global handler in main.py.

Request Flow:
    request → validate → PostGateway → response model
                  │             │
                  └─ 400        └─ 404 / 500 (typed errors)
"""

import logging
import re
from typing import List

from fastapi import APIRouter, Body, Depends

from blog_app.exceptions import ValidationError
from blog_app.schemas.post import (
    ErrorResponse,
    PostCreateRequest,
    PostResponse,
    PostWithAuthorResponse,
)
from blog_app.services.post_gateway import PostGateway, get_post_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])

# Optional sign followed by ASCII digits, nothing else
_INTEGER_ID = re.compile(r"[+-]?[0-9]+")


def parse_post_id(raw_id: str) -> int:
    """Parse a path-supplied identifier; ValidationError("invalid id") when it is not an integer."""
    if not _INTEGER_ID.fullmatch(raw_id):
        raise ValidationError(message="invalid id", field="id", context={"value": raw_id})
    return int(raw_id)


def validate_new_post(payload: PostCreateRequest) -> None:
    """
    Required-field checks for POST /posts, in a fixed order.

    1. title and content must both be present and non-blank
    2. authorId must be present
    """
    if not (payload.title and payload.title.strip()) or not (
        payload.content and payload.content.strip()
    ):
        raise ValidationError(
            message="title and content are required",
            context={"fields": ["title", "content"]},
        )
    if payload.author_id is None:
        raise ValidationError(message="authorId is required", field="authorId")


@router.get(
    "/posts",
    response_model=List[PostWithAuthorResponse],
    responses={
        200: {"description": "All posts, newest first, with authors"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all posts",
)
async def list_posts(
    gateway: PostGateway = Depends(get_post_gateway),
) -> List[PostWithAuthorResponse]:
    posts = await gateway.list_posts()
    return [PostWithAuthorResponse.model_validate(post) for post in posts]


@router.post(
    "/posts",
    status_code=201,
    response_model=PostResponse,
    responses={
        201: {"description": "Post created", "model": PostResponse},
        400: {"description": "Missing or malformed fields", "model": ErrorResponse},
        404: {"description": "Author not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a post",
    description=(
        "Creates a post for an existing author. `title` and `content` are required "
        "and checked first, then `authorId`. `published` defaults to false. "
        "The response is the stored post without the joined author."
    ),
)
async def create_post(
    payload: PostCreateRequest = Body(...),
    gateway: PostGateway = Depends(get_post_gateway),
) -> PostResponse:
    """
    Create a post.

    Error responses (handled by the global exception handler):
        HTTP 400: title/content missing or empty, authorId missing, malformed body
        HTTP 404: authorId matches no author (ReferenceNotFoundError)
        HTTP 500: DatabaseError, generic message only
    """
    validate_new_post(payload)

    post = await gateway.create_post(
        title=payload.title,
        content=payload.content,
        author_id=payload.author_id,
        published=bool(payload.published),
    )
    return PostResponse.model_validate(post)


@router.get(
    "/posts/{post_id}",
    response_model=PostWithAuthorResponse,
    responses={
        200: {"description": "The post with its author", "model": PostWithAuthorResponse},
        400: {"description": "Identifier is not an integer", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single post by ID",
)
async def get_post(
    post_id: str,
    gateway: PostGateway = Depends(get_post_gateway),
) -> PostWithAuthorResponse:
    """
    Get one post joined with its author.

    Args:
        post_id: Path segment, taken as text and parsed here so that a
                 non-numeric value is a 400 rather than FastAPI's 422.
    """
    post = await gateway.find_post_by_id(parse_post_id(post_id))
    return PostWithAuthorResponse.model_validate(post)
