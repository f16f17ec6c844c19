"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from unbounded_figures import __version__
from unbounded_figures.api import api_router, pages_router
from unbounded_figures.config import get_settings
from unbounded_figures.services.base import APIError, NotFoundError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - runs on startup and shutdown."""
    # Startup
    logger.info("Starting %s v%s", settings.app_name, __version__)
    logger.info("Debug mode: %s", settings.debug)
    logger.info("Database: %s", settings.database_url.split("///")[-1])  # Hide path details
    logger.info(
        "Identity verification: %s",
        "local JWT" if settings.auth_jwt_secret else settings.auth_provider_url or "NOT CONFIGURED",
    )

    Path(settings.avatar_dir).mkdir(parents=True, exist_ok=True)

    # Validate and log warnings
    warnings = settings.validate_runtime_config()
    if warnings:
        logger.warning("Configuration warnings:")
        for warning in warnings:
            logger.warning("  - %s", warning)
    else:
        logger.info("Configuration validation passed - no warnings")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    """Build the ``{"error": message}`` body every failure uses."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def first_validation_message(exc: RequestValidationError) -> str:
    """Human readable message for the first validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    ctx_error = error.get("ctx", {}).get("error")
    message = str(ctx_error) if ctx_error is not None else error.get("msg", "Invalid value")
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
    return f"{field}: {message}" if field else message


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors (including 404/405 from routing) as ``{"error": ...}``."""
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation failures as 400s."""
    return error_response(400, first_validation_message(exc))


@app.exception_handler(NotFoundError)
async def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle NotFoundError exceptions globally."""
    return error_response(404, str(exc) or "Resource not found")


@app.exception_handler(APIError)
async def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions globally."""
    return error_response(exc.status_code or 502, str(exc) or "Upstream error")


@app.exception_handler(IntegrityError)
async def integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle uniqueness and constraint violations."""
    logger.warning("Integrity error: %s", exc.orig)
    return error_response(409, "Conflicts with existing data")


@app.exception_handler(Exception)
async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Log and hide unexpected failures."""
    logger.exception("Unhandled error: %s", exc)
    return error_response(500, "Internal server error")


# Include routers
app.include_router(api_router)
app.include_router(pages_router)

app.mount(
    settings.avatar_url_prefix,
    StaticFiles(directory=settings.avatar_dir, check_dir=False),
    name="avatars",
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the API is running."""
    return {"status": "healthy", "version": __version__}
