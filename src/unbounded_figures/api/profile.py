"""Profile endpoints: lookup, update, avatar upload and username checks."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.api.me import apply_profile_update
from unbounded_figures.config import Settings, get_settings
from unbounded_figures.database import get_db
from unbounded_figures.schemas.user import (
    AvatarUploadResponse,
    ProfileEnvelope,
    ProfileUpdate,
    ProfileUpdateResponse,
    UsernameAvailability,
    UserResponse,
)
from unbounded_figures.services.avatars import store_avatar
from unbounded_figures.services.users import get_by_auth_id, is_username_taken
from unbounded_figures.utils.security import CurrentUser, Identity, OptionalUser

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileEnvelope)
async def get_profile(
    identity: Identity,
    db: AsyncSession = Depends(get_db),
) -> ProfileEnvelope:
    """Get the caller's local profile, or null if it is not provisioned yet.

    Requires authentication.
    """
    user = await get_by_auth_id(db, identity.subject)
    return ProfileEnvelope(profile=UserResponse.model_validate(user) if user else None)


@router.post("/update", response_model=ProfileUpdateResponse)
async def update_profile(
    current_user: CurrentUser,
    update: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProfileUpdateResponse:
    """Update the caller's profile (form endpoint).

    Same semantics as ``PATCH /api/me``.
    """
    user = await apply_profile_update(db, current_user, update)
    return ProfileUpdateResponse(success=True, user=UserResponse.model_validate(user))


@router.post("/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    current_user: CurrentUser,  # noqa: ARG001 - Required for auth enforcement
    settings: Annotated[Settings, Depends(get_settings)],
    avatar: UploadFile | None = File(None),
) -> AvatarUploadResponse:
    """Upload an avatar image and return the URL it is served from.

    Accepts PNG, JPEG, GIF or WebP up to the configured size limit.
    Requires a provisioned local user.
    """
    url = await store_avatar(avatar, settings)
    return AvatarUploadResponse(url=url)


@router.get("/check-username", response_model=UsernameAvailability)
async def check_username(
    viewer: OptionalUser,
    username: str = Query("", description="Username to check"),
    db: AsyncSession = Depends(get_db),
) -> UsernameAvailability:
    """Check whether a username is free.

    The caller's own username never counts as taken.
    """
    username = username.strip()
    if not username:
        raise HTTPException(status_code=400, detail="Missing username")

    taken = await is_username_taken(
        db, username, exclude_user_id=viewer.id if viewer is not None else None
    )
    return UsernameAvailability(available=not taken)
