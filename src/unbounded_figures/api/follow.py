"""Follow API endpoint."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.database import get_db
from unbounded_figures.schemas.user import FollowRequest, FollowResponse
from unbounded_figures.services.follows import toggle_follow
from unbounded_figures.utils.security import CurrentUser

router = APIRouter(tags=["follow"])


@router.post("/follow", response_model=FollowResponse)
async def follow(
    current_user: CurrentUser,
    data: FollowRequest,
    db: AsyncSession = Depends(get_db),
) -> FollowResponse:
    """Follow a user, or unfollow if already following.

    Returns the new state with the target's follower/following counts.
    Requires a provisioned local user.
    """
    username = (data.username or "").strip()
    if not username:
        raise HTTPException(status_code=400, detail="username required")

    state = await toggle_follow(db, current_user, username)
    return FollowResponse(
        is_following=state.is_following,
        followers=state.followers,
        following=state.following,
    )
