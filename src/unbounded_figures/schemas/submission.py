"""Pydantic schemas for submission, comment, view and feed endpoints."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from unbounded_figures.schemas.base import CamelModel
from unbounded_figures.schemas.user import AuthorSummary

Category = Literal["unbounded-space", "library-of-figures", "project-lab"]
Visibility = Literal["PUBLIC", "PRIVATE"]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=24)]

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    """Require an http(s) URL but keep the string exactly as submitted."""
    try:
        _http_url.validate_python(value)
    except ValidationError as e:
        msg = "File URL must be an http(s) URL"
        raise ValueError(msg) from e
    return value


FileUrl = Annotated[str, StringConstraints(max_length=2048), AfterValidator(_check_http_url)]

MAX_TAGS = 12


class SubmissionCreate(CamelModel):
    """Schema for creating a submission."""

    title: str = Field(min_length=3, max_length=200, description="Title (3-200 characters)")
    content: str | None = Field(
        default=None, max_length=20_000, description="Longform text or LaTeX"
    )
    file_url: FileUrl | None = Field(default=None, description="URL of an attached file")
    tags: list[Tag] | None = Field(
        default=None, max_length=MAX_TAGS, description="Up to 12 tags (1-24 characters each)"
    )
    ai_note: str | None = Field(
        default=None, max_length=2000, description="AI assistance disclosure"
    )
    category: Category = Field(default="unbounded-space", description="Site section")
    visibility: Visibility = Field(default="PUBLIC", description="PUBLIC or PRIVATE")
    allow_comments: bool = Field(default=True, description="Whether comments are accepted")

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str] | None) -> list[str] | None:
        """Drop repeated tags, keeping first occurrence order."""
        if v is None:
            return v
        return list(dict.fromkeys(v))


class SubmissionResponse(CamelModel):
    """A submission with its author projection."""

    id: int = Field(description="Submission ID")
    title: str = Field(description="Title")
    content: str | None = Field(default=None, description="Body text")
    file_url: str | None = Field(default=None, description="Attached file URL")
    tags: list[str] = Field(default_factory=list, description="Tags in submitted order")
    ai_note: str | None = Field(default=None, description="AI assistance disclosure")
    category: str = Field(description="Site section")
    visibility: str = Field(description="PUBLIC or PRIVATE")
    allow_comments: bool = Field(description="Whether comments are accepted")
    upvotes: int = Field(description="Upvote counter")
    author_id: int = Field(description="Author user ID")
    created_at: datetime = Field(description="When the submission was created")
    author: AuthorSummary = Field(description="Author")


class SubmissionListResponse(CamelModel):
    """One page of a keyset-paginated submission listing."""

    items: list[SubmissionResponse] = Field(default_factory=list, description="Page items")
    next_cursor: int | None = Field(
        default=None, description="Pass as cursor to fetch the next page; null on the last page"
    )


class RecommendationResponse(CamelModel):
    """Recommendation feed."""

    items: list[SubmissionResponse] = Field(default_factory=list, description="Recommended items")


class CommentCreate(CamelModel):
    """Schema for creating a comment."""

    content: str = Field(min_length=1, max_length=5000, description="Comment text")
    submission_id: int = Field(description="Submission being commented on")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Reject whitespace-only comments."""
        if not v.strip():
            msg = "Comment content cannot be blank"
            raise ValueError(msg)
        return v


class CommentResponse(CamelModel):
    """A comment with its author projection."""

    id: int = Field(description="Comment ID")
    content: str = Field(description="Comment text")
    submission_id: int = Field(description="Submission ID")
    author_id: int = Field(description="Author user ID")
    created_at: datetime = Field(description="When the comment was created")
    author: AuthorSummary = Field(description="Author")


class ViewCreate(CamelModel):
    """Schema for recording a view."""

    submission_id: int | None = Field(default=None, description="Submission that was opened")
