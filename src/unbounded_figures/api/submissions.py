"""Submission API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.database import get_db
from unbounded_figures.models.submission import Submission, SubmissionTag
from unbounded_figures.schemas.submission import (
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
)
from unbounded_figures.services.submissions import (
    clamp_page_size,
    get_visible_submission,
    list_page,
    visible_to,
)
from unbounded_figures.utils.security import CurrentUser, OptionalUser

router = APIRouter(prefix="/submissions", tags=["submissions"])


def submission_to_response(submission: Submission) -> SubmissionResponse:
    """Convert a Submission model to SubmissionResponse schema.

    Requires submission.author to be loaded.
    """
    return SubmissionResponse.model_validate(submission)


@router.post("", response_model=SubmissionResponse, status_code=201)
async def create_submission(
    current_user: CurrentUser,
    data: SubmissionCreate,
    db: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    """Create a submission owned by the current user.

    Either content or a file URL must be provided.
    Requires a provisioned local user.
    """
    if not data.content and not data.file_url:
        raise HTTPException(status_code=400, detail="Provide either content or fileUrl.")

    submission = Submission(
        title=data.title,
        content=data.content or None,
        file_url=data.file_url or None,
        ai_note=data.ai_note,
        category=data.category,
        visibility=data.visibility,
        allow_comments=data.allow_comments,
        upvotes=0,
        tag_links=[
            SubmissionTag(tag=tag, position=position)
            for position, tag in enumerate(data.tags or [])
        ],
    )
    submission.author = current_user
    db.add(submission)
    await db.flush()

    return submission_to_response(submission)


@router.get("", response_model=SubmissionListResponse)
async def list_submissions(
    viewer: OptionalUser,
    limit: int = Query(20, description="Page size, clamped to 5-50"),
    cursor: int | None = Query(None, description="Id of the last submission already seen"),
    db: AsyncSession = Depends(get_db),
) -> SubmissionListResponse:
    """List submissions newest first with keyset pagination.

    Returns public submissions plus the caller's own private ones.
    """
    items, next_cursor = await list_page(
        db,
        visible_to(viewer),
        limit=clamp_page_size(limit),
        cursor=cursor,
    )
    return SubmissionListResponse(
        items=[submission_to_response(s) for s in items],
        next_cursor=next_cursor,
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: int,
    viewer: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    """Get a single submission.

    Private submissions are only visible to their author.
    """
    submission = await get_visible_submission(db, submission_id, viewer)
    return submission_to_response(submission)
