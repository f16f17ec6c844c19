"""User ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unbounded_figures.database import Base

if TYPE_CHECKING:
    from unbounded_figures.models.activity import TagPref, View
    from unbounded_figures.models.follow import Follow
    from unbounded_figures.models.submission import Comment, Submission

DEFAULT_ROLE = "FIGURE"


class User(Base):
    """A figure: local profile bridged to an external identity."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    auth_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, index=True, nullable=True
    )  # Identity provider subject
    username: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default=DEFAULT_ROLE)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    submissions: Mapped[list[Submission]] = relationship(
        back_populates="author", cascade="all, delete-orphan"
    )
    comments: Mapped[list[Comment]] = relationship(
        back_populates="author", cascade="all, delete-orphan"
    )
    followers: Mapped[list[Follow]] = relationship(
        foreign_keys="Follow.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
    )
    following: Mapped[list[Follow]] = relationship(
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    views: Mapped[list[View]] = relationship(back_populates="user")
    tag_prefs: Mapped[list[TagPref]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
