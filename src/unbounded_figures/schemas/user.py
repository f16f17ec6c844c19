"""Pydantic schemas for user, profile and follow API endpoints."""

import re
from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints, field_validator

from unbounded_figures.schemas.base import CamelModel

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=32)]


class AuthorSummary(CamelModel):
    """Minimal user projection embedded in submissions and comments."""

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Display name")


class UserResponse(CamelModel):
    """Full local user record."""

    id: int = Field(description="User ID")
    auth_id: str | None = Field(default=None, description="Identity provider subject")
    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Display name")
    bio: str | None = Field(default=None, description="Short biography")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    role: str = Field(description="Role (FIGURE or ADMIN)")
    created_at: datetime = Field(description="When the user was created")


class MeResponse(CamelModel):
    """The current user's own profile with submission count."""

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Display name")
    bio: str | None = Field(default=None, description="Short biography")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    role: str = Field(description="Role")
    created_at: datetime = Field(description="When the user was created")
    submission_count: int = Field(default=0, description="Number of submissions authored")


class ProfileEnvelope(CamelModel):
    """Profile lookup result; null when no local user exists yet."""

    profile: UserResponse | None = Field(default=None, description="Local profile")


class ProfileUpdate(CamelModel):
    """Schema for updating the current user's profile."""

    username: Username | None = Field(default=None, description="New username (3-32 characters)")
    display_name: str | None = Field(default=None, max_length=80, description="Display name")
    bio: str | None = Field(default=None, max_length=1000, description="Short biography")
    avatar_url: str | None = Field(default=None, max_length=500, description="Avatar image URL")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        """Validate username contains only allowed characters."""
        if v is None:
            return v
        if not USERNAME_PATTERN.match(v):
            msg = "Username can only contain letters, numbers, underscores, and hyphens"
            raise ValueError(msg)
        return v


class ProfileUpdateResponse(CamelModel):
    """Response after a profile update."""

    success: bool = Field(default=True, description="Whether the update was applied")
    user: UserResponse = Field(description="Updated profile")


class UsernameAvailability(CamelModel):
    """Username availability check result."""

    available: bool = Field(description="True when no other user holds the username")


class AvatarUploadResponse(CamelModel):
    """Public URL of an uploaded avatar."""

    url: str = Field(description="Served path of the stored image")


class FollowRequest(CamelModel):
    """Schema for toggling a follow."""

    username: str | None = Field(default=None, description="Username of the user to (un)follow")


class FollowResponse(CamelModel):
    """Follow state and fresh counts for the target user."""

    is_following: bool = Field(description="Whether the caller now follows the target")
    followers: int = Field(description="Target's follower count")
    following: int = Field(description="Number of users the target follows")
