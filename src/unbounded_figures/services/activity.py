"""View logging and tag-preference accumulation."""

from datetime import datetime

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.models.activity import TagPref, View
from unbounded_figures.models.submission import Submission
from unbounded_figures.models.user import User
from unbounded_figures.services.submissions import get_visible_submission

UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def preference_tags(submission: Submission) -> list[str]:
    """Tags a view of ``submission`` counts towards, category included."""
    return list(dict.fromkeys([*submission.tags, submission.category_tag]))


async def bump_tag_weights(db: AsyncSession, user_id: int, tags: list[str]) -> None:
    """Add 1 to the user's weight for every tag, creating missing rows at 1.

    Raises:
        NotImplementedError: If the database has no ``ON CONFLICT`` upsert we emit.
    """
    if not tags:
        return

    dialect = db.get_bind().dialect.name
    insert = UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Tag weight upsert is not supported on {dialect}")

    now = datetime.utcnow()
    values = [{"user_id": user_id, "tag": tag, "weight": 1, "updated_at": now} for tag in tags]

    stmt = insert(TagPref).values(values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "tag"],
        set_={"weight": TagPref.weight + 1, "updated_at": now},
    )
    await db.execute(stmt)


async def record_view(db: AsyncSession, submission_id: int, viewer: User | None) -> View:
    """Append a view and, for known users, accumulate tag preferences.

    Only submissions the viewer may read can be viewed.

    Raises:
        NotFoundError: If the submission does not exist or is private to someone else.
    """
    submission = await get_visible_submission(db, submission_id, viewer)

    view = View(user_id=viewer.id if viewer is not None else None, submission_id=submission.id)
    db.add(view)
    await db.flush()

    if viewer is not None:
        await bump_tag_weights(db, viewer.id, preference_tags(submission))

    return view
