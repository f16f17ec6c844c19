"""Tag-weighted recommendation feed."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.models.activity import TagPref, View
from unbounded_figures.models.submission import CATEGORY_TAG_PREFIX, Submission, SubmissionTag
from unbounded_figures.services.submissions import newest_first, recent_public, submissions_query

FEED_SIZE = 10
TOP_TAG_COUNT = 5
VIEW_HISTORY_SIZE = 100

OPT_OUT_HEADERS = ("dnt", "sec-gpc")


def is_opted_out(off: str | None, headers: dict[str, str]) -> bool:
    """Whether the request asked not to be personalized.

    Honours ``?off=1`` and the Do Not Track / Global Privacy Control headers.
    """
    if off == "1":
        return True
    return any(headers.get(name) == "1" for name in OPT_OUT_HEADERS)


async def top_tags(db: AsyncSession, user_id: int, limit: int = TOP_TAG_COUNT) -> list[str]:
    """The user's heaviest tags, heaviest first."""
    query = (
        select(TagPref.tag)
        .where(TagPref.user_id == user_id)
        .order_by(TagPref.weight.desc(), TagPref.tag)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def recently_viewed_ids(
    db: AsyncSession, user_id: int, limit: int = VIEW_HISTORY_SIZE
) -> set[int]:
    """Submission ids from the user's latest views."""
    query = (
        select(View.submission_id)
        .where(View.user_id == user_id)
        .order_by(View.created_at.desc(), View.id.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return set(result.scalars().all())


async def recommend(
    db: AsyncSession, user_id: int | None, limit: int = FEED_SIZE
) -> list[Submission]:
    """Build the feed for a user.

    Without a user, or when nothing matches the user's top tags, the feed
    is simply the most recent public submissions.
    """
    if user_id is None:
        return await recent_public(db, limit)

    tags = await top_tags(db, user_id)
    plain_tags = [tag for tag in tags if not tag.startswith(CATEGORY_TAG_PREFIX)]
    categories = [
        tag.removeprefix(CATEGORY_TAG_PREFIX) for tag in tags if tag.startswith(CATEGORY_TAG_PREFIX)
    ]

    matches = []
    if plain_tags:
        matches.append(Submission.tag_links.any(SubmissionTag.tag.in_(plain_tags)))
    if categories:
        matches.append(Submission.category.in_(categories))
    if not matches:
        return await recent_public(db, limit)

    query = submissions_query().where(Submission.visibility == "PUBLIC", or_(*matches))

    viewed = await recently_viewed_ids(db, user_id)
    if viewed:
        query = query.where(Submission.id.not_in(viewed))

    result = await db.execute(newest_first(query).limit(limit))
    items = list(result.scalars().all())

    if not items:
        return await recent_public(db, limit)
    return items
