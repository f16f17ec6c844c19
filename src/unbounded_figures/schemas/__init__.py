"""Pydantic schemas for request/response validation."""

from unbounded_figures.schemas.external import ExternalIdentity, ProviderUser
from unbounded_figures.schemas.page import (
    ActivityItem,
    DashboardPage,
    ProfileStats,
    PublicProfilePage,
    RecentWorkItem,
    SubmissionPage,
)
from unbounded_figures.schemas.submission import (
    CommentCreate,
    CommentResponse,
    RecommendationResponse,
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
    ViewCreate,
)
from unbounded_figures.schemas.user import (
    AuthorSummary,
    AvatarUploadResponse,
    FollowRequest,
    FollowResponse,
    MeResponse,
    ProfileEnvelope,
    ProfileUpdate,
    ProfileUpdateResponse,
    UsernameAvailability,
    UserResponse,
)

__all__ = [
    # Identity provider schemas
    "ExternalIdentity",
    "ProviderUser",
    # User schemas
    "AuthorSummary",
    "AvatarUploadResponse",
    "FollowRequest",
    "FollowResponse",
    "MeResponse",
    "ProfileEnvelope",
    "ProfileUpdate",
    "ProfileUpdateResponse",
    "UsernameAvailability",
    "UserResponse",
    # Submission schemas
    "CommentCreate",
    "CommentResponse",
    "RecommendationResponse",
    "SubmissionCreate",
    "SubmissionListResponse",
    "SubmissionResponse",
    "ViewCreate",
    # Page view models
    "ActivityItem",
    "DashboardPage",
    "ProfileStats",
    "PublicProfilePage",
    "RecentWorkItem",
    "SubmissionPage",
]
