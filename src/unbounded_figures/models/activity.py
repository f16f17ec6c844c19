"""View log and tag preference ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unbounded_figures.database import Base

if TYPE_CHECKING:
    from unbounded_figures.models.submission import Submission
    from unbounded_figures.models.user import User


class View(Base):
    """Append-only record of a submission being opened."""

    __tablename__ = "views"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True
    )  # Null for anonymous views
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, index=True)

    # Relationships
    user: Mapped[User | None] = relationship(back_populates="views")
    submission: Mapped[Submission] = relationship(back_populates="views")


class TagPref(Base):
    """Accumulated interest of a user in one tag."""

    __tablename__ = "tag_prefs"
    __table_args__ = (UniqueConstraint("user_id", "tag", name="uq_user_tag"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    tag: Mapped[str] = mapped_column(String(64))
    weight: Mapped[int] = mapped_column(default=0)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user: Mapped[User] = relationship(back_populates="tag_prefs")
