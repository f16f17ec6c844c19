"""SQLAlchemy ORM models."""

from unbounded_figures.models.activity import TagPref, View
from unbounded_figures.models.follow import Follow
from unbounded_figures.models.submission import Comment, Submission, SubmissionTag
from unbounded_figures.models.user import User

__all__ = [
    "Comment",
    "Follow",
    "Submission",
    "SubmissionTag",
    "TagPref",
    "User",
    "View",
]
