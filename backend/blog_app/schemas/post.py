"""
Blog Backend: Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the JSON contract of the posts API.
How:   FastAPI validates request bodies against these, serializes responses
       from ORM objects (`from_attributes`), and builds the OpenAPI docs.
       Field names are snake_case in Python and camelCase on the wire
       (`author_id` ↔ `authorId`, `created_at` ↔ `createdAt`).

Schemas are separate from SQLAlchemy models so the wire format and the table
layout can change independently.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every schema: camelCase aliases, populate by either name, read ORM attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthorResponse(CamelModel):
    """An Author as embedded in the joined post view."""

    id: int = Field(description="Author identifier")
    name: str = Field(description="Display name")
    email: str = Field(description="Unique email address")


class PostResponse(CamelModel):
    """
    What:  The raw Post record.
    Who:   Returned by POST /posts (201). The author is NOT joined on this path.
    """

    id: int = Field(description="Post identifier, never reused")
    title: str = Field(description="Post title")
    content: str = Field(description="Post body")
    published: bool = Field(description="Whether the post is published")
    created_at: datetime = Field(description="Creation timestamp (ISO 8601)")
    author_id: int = Field(description="Identifier of the owning Author")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """SQLite returns naive datetimes; stored values are always UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class PostWithAuthorResponse(PostResponse):
    """
    What:  Post joined with its Author.
    Who:   Returned by GET /posts (as array items) and GET /posts/{id}.
    """

    author: AuthorResponse = Field(description="The post's author")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreateRequest(CamelModel):
    """
    Body of POST /posts.

    Every field is optional at the schema level so the route can apply the
    required-field checks in a fixed order (title/content first, then
    authorId) and answer 400 with a specific message. Types are strict:
    `"authorId": "1"` or `"published": "yes"` are rejected as malformed.
    """

    title: Optional[StrictStr] = Field(default=None, description="Post title (required, non-empty)")
    content: Optional[StrictStr] = Field(default=None, description="Post body (required, non-empty)")
    author_id: Optional[StrictInt] = Field(default=None, description="Existing Author id (required)")
    published: Optional[StrictBool] = Field(default=False, description="Defaults to false")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "post not found",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
