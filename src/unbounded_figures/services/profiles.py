"""Dashboard and public profile aggregation."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from unbounded_figures.models.submission import Comment, Submission
from unbounded_figures.models.user import User
from unbounded_figures.schemas.page import (
    ActivityItem,
    DashboardPage,
    ProfileStats,
    PublicProfilePage,
    RecentWorkItem,
)
from unbounded_figures.services.follows import is_following
from unbounded_figures.services.users import count_activity, get_by_username

ACTIVITY_WINDOW = 20
RECENT_WORK_SIZE = 5

# Same-instant events list comments first, then higher ids first.
_TYPE_RANK = {"comment": 0, "submission": 1}


def merge_activity(items: list[ActivityItem]) -> list[ActivityItem]:
    """Sort submission and comment events newest first, deterministically."""
    return sorted(
        items,
        key=lambda item: (item.created_at, -_TYPE_RANK[item.type], item.id),
        reverse=True,
    )


async def _recent_work(
    db: AsyncSession, author_id: int, limit: int | None, public_only: bool = False
) -> list[RecentWorkItem]:
    """The author's submissions, newest first, with comment counts."""
    comment_count = (
        select(func.count(Comment.id))
        .where(Comment.submission_id == Submission.id)
        .correlate(Submission)
        .scalar_subquery()
        .label("comment_count")
    )
    query = (
        select(
            Submission.id,
            Submission.title,
            Submission.created_at,
            Submission.category,
            comment_count,
        )
        .where(Submission.author_id == author_id)
        .order_by(Submission.created_at.desc(), Submission.id.desc())
    )
    if public_only:
        query = query.where(Submission.visibility == "PUBLIC")
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return [
        RecentWorkItem(
            id=row.id,
            title=row.title,
            created_at=row.created_at,
            category=row.category,
            comment_count=row.comment_count,
        )
        for row in result.all()
    ]


async def build_dashboard(db: AsyncSession, user: User) -> DashboardPage:
    """Counts, merged activity and recent work for the signed-in user."""
    counts = await count_activity(db, user.id)
    submissions = await _recent_work(db, user.id, ACTIVITY_WINDOW)

    comments_result = await db.execute(
        select(Comment)
        .where(Comment.author_id == user.id)
        .options(selectinload(Comment.submission))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(ACTIVITY_WINDOW)
    )
    comments = comments_result.scalars().all()

    activity = [
        ActivityItem(type="submission", id=s.id, created_at=s.created_at, title=s.title)
        for s in submissions
    ]
    activity.extend(
        ActivityItem(
            type="comment",
            id=c.id,
            created_at=c.created_at,
            title=c.submission.title,
            content=c.content,
            submission_id=c.submission_id,
        )
        for c in comments
    )

    return DashboardPage(
        username=user.username,
        display_name=user.display_name,
        submissions=counts.submissions,
        comments=counts.comments,
        followers=counts.followers,
        following=counts.following,
        activity=merge_activity(activity),
        recent_work=submissions[:RECENT_WORK_SIZE],
    )


async def build_public_profile(
    db: AsyncSession, username: str, viewer: User | None
) -> PublicProfilePage:
    """Public view of a user's profile and public submissions.

    Raises:
        NotFoundError: If the username does not exist.
    """
    user = await get_by_username(db, username)
    counts = await count_activity(db, user.id)

    viewer_follows = False
    if viewer is not None and viewer.id != user.id:
        viewer_follows = await is_following(db, viewer.id, user.id)

    return PublicProfilePage(
        username=user.username,
        display_name=user.display_name,
        bio=user.bio,
        avatar_url=user.avatar_url,
        joined_at=user.created_at,
        stats=ProfileStats(
            submissions=counts.submissions,
            comments=counts.comments,
            followers=counts.followers,
            following=counts.following,
        ),
        is_following=viewer_follows,
        submissions=await _recent_work(db, user.id, None, public_only=True),
    )
