"""Recommendation feed API endpoint."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.api.submissions import submission_to_response
from unbounded_figures.database import get_db
from unbounded_figures.schemas.submission import RecommendationResponse
from unbounded_figures.services.recommendations import is_opted_out, recommend
from unbounded_figures.utils.security import OptionalUser

router = APIRouter(prefix="/recs", tags=["recommendations"])


@router.get("", response_model=RecommendationResponse)
async def get_recommendations(
    request: Request,
    viewer: OptionalUser,
    off: str | None = Query(None, description="Set to 1 to turn personalization off"),
    db: AsyncSession = Depends(get_db),
) -> RecommendationResponse:
    """Recommended submissions for the caller.

    Personalization is skipped for anonymous callers and when opted out
    via ``?off=1``, ``DNT: 1`` or ``Sec-GPC: 1``.
    """
    user_id = viewer.id if viewer is not None else None
    if is_opted_out(off, dict(request.headers)):
        user_id = None

    items = await recommend(db, user_id)
    return RecommendationResponse(items=[submission_to_response(s) for s in items])
