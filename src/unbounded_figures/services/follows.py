"""Follow toggling."""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.models.follow import Follow
from unbounded_figures.models.user import User
from unbounded_figures.services.base import APIError, NotFoundError
from unbounded_figures.services.users import count_activity

logger = logging.getLogger(__name__)


class SelfFollowError(APIError):
    """Raised when a user tries to follow themselves."""

    def __init__(self, message: str = "You cannot follow yourself."):
        super().__init__(message, status_code=400)


@dataclass(frozen=True)
class FollowState:
    """Follow state after a toggle, with the target's fresh counts."""

    is_following: bool
    followers: int
    following: int


async def is_following(db: AsyncSession, follower_id: int, following_id: int) -> bool:
    """Whether ``follower_id`` follows ``following_id``."""
    result = await db.execute(
        select(Follow.id).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def toggle_follow(db: AsyncSession, actor: User, target_username: str) -> FollowState:
    """Follow the target if not already following, otherwise unfollow.

    The target row is locked for the rest of the transaction so duplicate
    toggles from the same user serialize on backends with row locks.

    Raises:
        NotFoundError: If the target username does not exist.
        SelfFollowError: If the actor is the target.
    """
    result = await db.execute(
        select(User).where(User.username == target_username).with_for_update()
    )
    target = result.scalar_one_or_none()
    if target is None:
        raise NotFoundError("User not found")

    if target.id == actor.id:
        raise SelfFollowError()

    existing_result = await db.execute(
        select(Follow).where(
            Follow.follower_id == actor.id,
            Follow.following_id == target.id,
        )
    )
    existing = existing_result.scalar_one_or_none()

    if existing is not None:
        await db.delete(existing)
        now_following = False
    else:
        db.add(Follow(follower_id=actor.id, following_id=target.id))
        now_following = True
    await db.flush()

    logger.info(
        "User %s %s user %s",
        actor.id,
        "followed" if now_following else "unfollowed",
        target.id,
    )

    counts = await count_activity(db, target.id)
    return FollowState(
        is_following=now_following,
        followers=counts.followers,
        following=counts.following,
    )
