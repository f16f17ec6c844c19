"""Main API router aggregation."""

from fastapi import APIRouter

from unbounded_figures.api.comments import router as comments_router
from unbounded_figures.api.follow import router as follow_router
from unbounded_figures.api.me import router as me_router
from unbounded_figures.api.profile import router as profile_router
from unbounded_figures.api.recs import router as recs_router
from unbounded_figures.api.submissions import router as submissions_router
from unbounded_figures.api.views import router as views_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(me_router)
api_router.include_router(profile_router)
api_router.include_router(submissions_router)
api_router.include_router(comments_router)
api_router.include_router(follow_router)
api_router.include_router(views_router)
api_router.include_router(recs_router)
