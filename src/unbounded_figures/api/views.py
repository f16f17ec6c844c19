"""View tracking API endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.database import get_db
from unbounded_figures.schemas.submission import ViewCreate
from unbounded_figures.services.activity import record_view
from unbounded_figures.utils.security import OptionalUser

router = APIRouter(prefix="/views", tags=["views"])


@router.post("", status_code=204)
async def create_view(
    viewer: OptionalUser,
    data: ViewCreate,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Record that a submission was opened.

    Signed-in viewers also accumulate interest in the submission's tags
    and category.
    """
    if data.submission_id is None:
        raise HTTPException(status_code=400, detail="submissionId required")

    await record_view(db, data.submission_id, viewer)
    return Response(status_code=204)
