"""HTTP API routers."""

from unbounded_figures.api.pages import router as pages_router
from unbounded_figures.api.router import api_router

__all__ = ["api_router", "pages_router"]
