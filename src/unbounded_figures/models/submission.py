"""Submission, tag and comment ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unbounded_figures.database import Base

if TYPE_CHECKING:
    from unbounded_figures.models.activity import View
    from unbounded_figures.models.user import User

CATEGORIES = ("unbounded-space", "library-of-figures", "project-lab")
VISIBILITIES = ("PUBLIC", "PRIVATE")
CATEGORY_TAG_PREFIX = "cat:"


class Submission(Base):
    """A figure: text and/or an attached file published by a user."""

    __tablename__ = "submissions"
    __table_args__ = (
        CheckConstraint(
            "content IS NOT NULL OR file_url IS NOT NULL", name="ck_submission_has_body"
        ),
        Index("ix_submissions_created_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    ai_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(32), default=CATEGORIES[0], index=True)
    visibility: Mapped[str] = mapped_column(String(10), default="PUBLIC", index=True)
    allow_comments: Mapped[bool] = mapped_column(default=True)
    upvotes: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    author: Mapped[User] = relationship(back_populates="submissions")
    tag_links: Mapped[list[SubmissionTag]] = relationship(
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionTag.position",
        lazy="selectin",
    )
    comments: Mapped[list[Comment]] = relationship(
        back_populates="submission", cascade="all, delete-orphan"
    )
    views: Mapped[list[View]] = relationship(
        back_populates="submission", cascade="all, delete-orphan"
    )

    @property
    def tags(self) -> list[str]:
        """Tags in the order they were submitted."""
        return [link.tag for link in self.tag_links]

    @property
    def category_tag(self) -> str:
        """Tag-preference key standing for this submission's category."""
        return f"{CATEGORY_TAG_PREFIX}{self.category}"


class SubmissionTag(Base):
    """One tag attached to a submission."""

    __tablename__ = "submission_tags"
    __table_args__ = (UniqueConstraint("submission_id", "tag", name="uq_submission_tag"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), index=True
    )
    tag: Mapped[str] = mapped_column(String(24), index=True)
    position: Mapped[int] = mapped_column(default=0)

    # Relationships
    submission: Mapped[Submission] = relationship(back_populates="tag_links")


class Comment(Base):
    """A comment left on a submission."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), index=True
    )
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    author: Mapped[User] = relationship(back_populates="comments")
    submission: Mapped[Submission] = relationship(back_populates="comments")
