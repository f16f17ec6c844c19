"""Current-user endpoints: identity bridging and own profile."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.database import get_db
from unbounded_figures.models.user import User
from unbounded_figures.schemas.user import MeResponse, ProfileUpdate, UserResponse
from unbounded_figures.services.users import count_activity, ensure_local_user, is_username_taken
from unbounded_figures.utils.security import CurrentUser, Identity

router = APIRouter(prefix="/me", tags=["me"])


async def apply_profile_update(db: AsyncSession, user: User, update: ProfileUpdate) -> User:
    """Apply the fields present in ``update`` to ``user``.

    Raises:
        HTTPException 409: If the new username belongs to someone else
    """
    changes = update.model_dump(exclude_unset=True)

    username = changes.get("username")
    if username is not None and username != user.username:
        if await is_username_taken(db, username, exclude_user_id=user.id):
            raise HTTPException(status_code=409, detail="Username already taken")
    elif "username" in changes:
        # A null username means "leave unchanged"; the column is required.
        changes.pop("username")

    for field, value in changes.items():
        setattr(user, field, value)

    await db.flush()
    await db.refresh(user)
    return user


@router.api_route("/ensure", methods=["GET", "POST"], response_model=UserResponse)
async def ensure_me(
    identity: Identity,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Return the caller's local user, creating it on first sign-in.

    Responds 201 when the user was created, 200 when it already existed.
    Requires authentication.
    """
    user, created = await ensure_local_user(db, identity)
    if created:
        response.status_code = 201
    return UserResponse.model_validate(user)


@router.get("", response_model=MeResponse)
async def get_me(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MeResponse:
    """Get the current user's profile with their submission count.

    Requires a provisioned local user.
    """
    counts = await count_activity(db, current_user.id)
    return MeResponse(
        id=current_user.id,
        username=current_user.username,
        display_name=current_user.display_name,
        bio=current_user.bio,
        avatar_url=current_user.avatar_url,
        role=current_user.role,
        created_at=current_user.created_at,
        submission_count=counts.submissions,
    )


@router.patch("", response_model=UserResponse)
async def update_me(
    current_user: CurrentUser,
    update: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update username, display name, bio or avatar URL.

    Only fields present in the body are changed.
    Requires a provisioned local user.
    """
    user = await apply_profile_update(db, current_user, update)
    return UserResponse.model_validate(user)
