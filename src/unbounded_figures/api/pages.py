"""Page endpoints returning the data each server-rendered page needs."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.api.comments import list_comments_for
from unbounded_figures.api.submissions import submission_to_response
from unbounded_figures.database import get_db
from unbounded_figures.models.submission import Submission, SubmissionTag
from unbounded_figures.schemas.page import DashboardPage, PublicProfilePage, SubmissionPage
from unbounded_figures.schemas.submission import Category, SubmissionListResponse
from unbounded_figures.services.profiles import build_dashboard, build_public_profile
from unbounded_figures.services.submissions import (
    clamp_page_size,
    get_visible_submission,
    list_page,
)
from unbounded_figures.utils.security import MaybeIdentity, OptionalUser

router = APIRouter(tags=["pages"])

SIGNIN_PATH = "/auth/signin"
ENSURE_PATH = "/api/me/ensure"


@router.get("/dashboard", response_model=DashboardPage)
async def dashboard(
    identity: MaybeIdentity,
    viewer: OptionalUser,
    db: AsyncSession = Depends(get_db),
):
    """Dashboard data for the signed-in user.

    Redirects to sign-in when unauthenticated and to the ensure endpoint
    when the local user has not been provisioned yet.
    """
    if viewer is None:
        target = ENSURE_PATH if identity is not None else SIGNIN_PATH
        return RedirectResponse(target, status_code=307)
    return await build_dashboard(db, viewer)


@router.get("/u/{username}", response_model=PublicProfilePage)
async def public_profile(
    username: str,
    viewer: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> PublicProfilePage:
    """Public profile data for ``username``."""
    return await build_public_profile(db, username.strip(), viewer)


@router.get("/submissions/{submission_id}", response_model=SubmissionPage)
async def submission_detail(
    submission_id: int,
    viewer: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> SubmissionPage:
    """A submission and its comments."""
    submission = await get_visible_submission(db, submission_id, viewer)
    return SubmissionPage(
        submission=submission_to_response(submission),
        comments=await list_comments_for(db, submission.id),
    )


@router.get("/library", response_model=SubmissionListResponse)
async def library(
    category: Category | None = Query(None, description="Only this site section"),
    tag: str | None = Query(None, description="Only submissions carrying this tag"),
    limit: int = Query(20, description="Page size, clamped to 5-50"),
    cursor: int | None = Query(None, description="Id of the last submission already seen"),
    db: AsyncSession = Depends(get_db),
) -> SubmissionListResponse:
    """Browse public submissions, newest first."""
    conditions = [Submission.visibility == "PUBLIC"]
    if category is not None:
        conditions.append(Submission.category == category)
    tag = (tag or "").strip()
    if tag:
        conditions.append(Submission.tag_links.any(SubmissionTag.tag == tag))

    items, next_cursor = await list_page(
        db, *conditions, limit=clamp_page_size(limit), cursor=cursor
    )
    return SubmissionListResponse(
        items=[submission_to_response(s) for s in items],
        next_cursor=next_cursor,
    )
