"""Submission queries shared by the API and page endpoints."""

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from unbounded_figures.models.submission import Submission
from unbounded_figures.models.user import User
from unbounded_figures.services.base import APIError, NotFoundError

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 50


class InvalidCursorError(APIError):
    """Raised when a pagination cursor does not name an existing submission."""

    def __init__(self, message: str = "Invalid cursor"):
        super().__init__(message, status_code=400)


def clamp_page_size(limit: int | None) -> int:
    """Clamp a requested page size into the allowed range."""
    if limit is None:
        return DEFAULT_PAGE_SIZE
    return min(max(limit, MIN_PAGE_SIZE), MAX_PAGE_SIZE)


def newest_first(query: Select) -> Select:
    """Order submissions newest first with a stable id tie-break."""
    return query.order_by(Submission.created_at.desc(), Submission.id.desc())


def submissions_query() -> Select:
    """Base select for submissions with their authors loaded."""
    return select(Submission).options(selectinload(Submission.author))


def visible_to(viewer: User | None) -> ColumnElement[bool]:
    """Public submissions, plus the viewer's own private ones."""
    public = Submission.visibility == "PUBLIC"
    if viewer is None:
        return public
    return or_(public, Submission.author_id == viewer.id)


async def get_visible_submission(
    db: AsyncSession, submission_id: int, viewer: User | None
) -> Submission:
    """Fetch one submission the viewer is allowed to see.

    Raises:
        NotFoundError: If it does not exist or is private to someone else.
    """
    query = submissions_query().where(Submission.id == submission_id, visible_to(viewer))
    result = await db.execute(query)
    submission = result.scalar_one_or_none()
    if submission is None:
        raise NotFoundError("Not found")
    return submission


async def list_page(
    db: AsyncSession,
    *conditions: ColumnElement[bool],
    limit: int,
    cursor: int | None = None,
) -> tuple[list[Submission], int | None]:
    """Return one keyset page of submissions, newest first.

    Fetches one row more than requested to learn whether another page
    exists; the cursor is the id of the last row handed out.

    Raises:
        InvalidCursorError: If the cursor names no submission.
    """
    query = submissions_query().where(*conditions)

    if cursor is not None:
        anchor_result = await db.execute(
            select(Submission.created_at, Submission.id).where(Submission.id == cursor)
        )
        anchor = anchor_result.one_or_none()
        if anchor is None:
            raise InvalidCursorError()
        anchor_created_at, anchor_id = anchor
        query = query.where(
            or_(
                Submission.created_at < anchor_created_at,
                and_(Submission.created_at == anchor_created_at, Submission.id < anchor_id),
            )
        )

    result = await db.execute(newest_first(query).limit(limit + 1))
    rows = list(result.scalars().all())

    if len(rows) > limit:
        page = rows[:limit]
        return page, page[-1].id
    return rows, None


async def recent_public(db: AsyncSession, limit: int = 10) -> list[Submission]:
    """Most recent public submissions."""
    query = newest_first(submissions_query().where(Submission.visibility == "PUBLIC"))
    result = await db.execute(query.limit(limit))
    return list(result.scalars().all())
