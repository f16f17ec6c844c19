"""Local user provisioning and lookups."""

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.models.follow import Follow
from unbounded_figures.models.submission import Comment, Submission
from unbounded_figures.models.user import DEFAULT_ROLE, User
from unbounded_figures.schemas.external import ExternalIdentity
from unbounded_figures.services.base import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_USERNAME_PREFIX = "figure_"
SEED_USERNAME = "founderFigure"


@dataclass(frozen=True)
class UserCounts:
    """Aggregate counters for one user."""

    submissions: int
    comments: int
    followers: int
    following: int


def default_username(subject: str) -> str:
    """Username given to a freshly provisioned user."""
    return f"{DEFAULT_USERNAME_PREFIX}{subject[:8]}"


async def get_by_auth_id(db: AsyncSession, auth_id: str) -> User | None:
    """Find the local user bridged to an external subject."""
    result = await db.execute(select(User).where(User.auth_id == auth_id))
    return result.scalar_one_or_none()


async def get_by_username(db: AsyncSession, username: str) -> User:
    """Find a user by username.

    Raises:
        NotFoundError: If no user has that username.
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def ensure_local_user(db: AsyncSession, identity: ExternalIdentity) -> tuple[User, bool]:
    """Return the local user for an identity, creating it on first use.

    A concurrent first request for the same subject loses on the unique
    ``auth_id`` constraint and surfaces as an ``IntegrityError``.

    Returns:
        The user and whether it was created by this call.
    """
    existing = await get_by_auth_id(db, identity.subject)
    if existing is not None:
        return existing, False

    username = default_username(identity.subject)
    user = User(
        auth_id=identity.subject,
        username=username,
        display_name=identity.email or username,
        role=DEFAULT_ROLE,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("Provisioned local user %s for subject %s", user.id, identity.subject)
    return user, True


async def is_username_taken(
    db: AsyncSession, username: str, exclude_user_id: int | None = None
) -> bool:
    """Whether another user already holds ``username``."""
    query = select(User.id).where(User.username == username)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def count_activity(db: AsyncSession, user_id: int) -> UserCounts:
    """Count submissions, comments, followers and followees of a user."""
    query = select(
        select(func.count(Submission.id))
        .where(Submission.author_id == user_id)
        .scalar_subquery(),
        select(func.count(Comment.id)).where(Comment.author_id == user_id).scalar_subquery(),
        select(func.count(Follow.id)).where(Follow.following_id == user_id).scalar_subquery(),
        select(func.count(Follow.id)).where(Follow.follower_id == user_id).scalar_subquery(),
    )
    result = await db.execute(query)
    submissions, comments, followers, following = result.one()
    return UserCounts(
        submissions=submissions,
        comments=comments,
        followers=followers,
        following=following,
    )


async def seed_user(db: AsyncSession, username: str = SEED_USERNAME) -> tuple[User, bool]:
    """Find or create the development user the seed bypass acts as.

    The seeded row has no ``auth_id``; it is only reachable through
    ``DEV_SEED_USER_ID``.

    Returns:
        The user and whether it was created by this call.
    """
    result = await db.execute(select(User).where(User.username == username))
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing, False

    user = User(
        username=username,
        display_name="Founder Figure",
        bio="Seeded user for dev.",
        role=DEFAULT_ROLE,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("Seeded development user %s (%s)", user.id, username)
    return user, True
