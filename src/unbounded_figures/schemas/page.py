"""View models returned by the page endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from unbounded_figures.schemas.base import CamelModel
from unbounded_figures.schemas.submission import CommentResponse, SubmissionResponse


class ActivityItem(CamelModel):
    """One entry of the merged submission/comment activity stream."""

    type: Literal["submission", "comment"] = Field(description="Event kind")
    id: int = Field(description="Submission or comment ID")
    created_at: datetime = Field(description="When the event happened")
    title: str = Field(description="Submission title")
    content: str | None = Field(default=None, description="Comment text (comments only)")
    submission_id: int | None = Field(
        default=None, description="Commented submission (comments only)"
    )


class RecentWorkItem(CamelModel):
    """A submission summary with its comment count."""

    id: int = Field(description="Submission ID")
    title: str = Field(description="Title")
    created_at: datetime = Field(description="When the submission was created")
    category: str | None = Field(default=None, description="Site section")
    comment_count: int = Field(default=0, description="Number of comments")


class DashboardPage(CamelModel):
    """Data for the signed-in user's dashboard."""

    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Display name")
    submissions: int = Field(description="Total submissions")
    comments: int = Field(description="Total comments")
    followers: int = Field(description="Follower count")
    following: int = Field(description="Following count")
    activity: list[ActivityItem] = Field(default_factory=list, description="Recent activity")
    recent_work: list[RecentWorkItem] = Field(
        default_factory=list, description="Five most recent submissions"
    )


class ProfileStats(CamelModel):
    """Counters shown on a public profile."""

    submissions: int = Field(description="Total submissions")
    comments: int = Field(description="Total comments")
    followers: int = Field(description="Follower count")
    following: int = Field(description="Following count")


class PublicProfilePage(CamelModel):
    """Data for a public profile page."""

    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Display name")
    bio: str | None = Field(default=None, description="Short biography")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    joined_at: datetime = Field(description="When the user joined")
    stats: ProfileStats = Field(description="Counters")
    is_following: bool = Field(default=False, description="Whether the viewer follows this user")
    submissions: list[RecentWorkItem] = Field(
        default_factory=list, description="Public submissions, newest first"
    )


class SubmissionPage(CamelModel):
    """Data for a submission detail page."""

    submission: SubmissionResponse = Field(description="The submission")
    comments: list[CommentResponse] = Field(
        default_factory=list, description="Comments, oldest first"
    )
