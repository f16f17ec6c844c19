"""Comment API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from unbounded_figures.database import get_db
from unbounded_figures.models.submission import Comment
from unbounded_figures.schemas.submission import CommentCreate, CommentResponse
from unbounded_figures.services.submissions import get_visible_submission
from unbounded_figures.utils.security import CurrentUser, OptionalUser

router = APIRouter(prefix="/comments", tags=["comments"])


async def list_comments_for(db: AsyncSession, submission_id: int) -> list[CommentResponse]:
    """Comments on a submission, oldest first."""
    query = (
        select(Comment)
        .where(Comment.submission_id == submission_id)
        .options(selectinload(Comment.author))
        .order_by(Comment.created_at, Comment.id)
    )
    result = await db.execute(query)
    return [CommentResponse.model_validate(c) for c in result.scalars().all()]


@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(
    current_user: CurrentUser,
    data: CommentCreate,
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    """Comment on a submission.

    Requires a provisioned local user. Rejected when the submission has
    comments turned off.
    """
    submission = await get_visible_submission(db, data.submission_id, current_user)

    if not submission.allow_comments:
        raise HTTPException(status_code=403, detail="Comments are disabled for this submission")

    comment = Comment(content=data.content, submission_id=submission.id)
    comment.author = current_user
    db.add(comment)
    await db.flush()

    return CommentResponse.model_validate(comment)


@router.get("/{submission_id}", response_model=list[CommentResponse])
async def list_comments(
    submission_id: int,
    viewer: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> list[CommentResponse]:
    """List the comments on a submission, oldest first."""
    await get_visible_submission(db, submission_id, viewer)
    return await list_comments_for(db, submission_id)
