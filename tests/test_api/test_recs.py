"""Tests for the recommendation feed."""

from datetime import datetime, timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.models.activity import TagPref, View


class TestRecommendations:
    """Tests for GET /api/recs."""

    async def test_fallback_is_recent_public(
        self, client: AsyncClient, create_user, create_submission
    ) -> None:
        """Test that callers without history get the ten newest public items."""
        author = await create_user("turing")
        start = datetime(2026, 1, 1)
        for i in range(12):
            await create_submission(author, f"Machine {i}", created_at=start + timedelta(days=i))
        await create_submission(
            author, "Hidden", visibility="PRIVATE", created_at=start + timedelta(days=30)
        )

        response = await client.get("/api/recs")

        assert response.status_code == 200
        titles = [item["title"] for item in response.json()["items"]]
        assert titles == [f"Machine {i}" for i in range(11, 1, -1)]

    async def test_personalized_feed_matches_top_tags(
        self,
        client: AsyncClient,
        db: AsyncSession,
        create_user,
        create_submission,
        auth_headers,
    ) -> None:
        """Test that the feed follows the reader's heaviest tags and skips seen items."""
        reader = await create_user("reader")
        author = await create_user("kolmogorov")
        seen = await create_submission(
            author, "Seen topology", tags=["topology"], created_at=datetime(2026, 1, 3)
        )
        await create_submission(
            author, "Fresh topology", tags=["topology"], created_at=datetime(2026, 1, 2)
        )
        await create_submission(
            author,
            "Probability",
            tags=["probability"],
            category="project-lab",
            created_at=datetime(2026, 1, 4),
        )
        db.add_all(
            [
                TagPref(user_id=reader.id, tag="topology", weight=3),
                View(user_id=reader.id, submission_id=seen.id),
            ]
        )
        await db.commit()

        response = await client.get("/api/recs", headers=auth_headers("auth-reader"))

        titles = [item["title"] for item in response.json()["items"]]
        assert titles == ["Fresh topology"]

    async def test_category_preference_matches_section(
        self,
        client: AsyncClient,
        db: AsyncSession,
        create_user,
        create_submission,
        auth_headers,
    ) -> None:
        """Test that category tags select submissions from that section."""
        reader = await create_user("reader")
        author = await create_user("kolmogorov")
        await create_submission(author, "Lab notes", category="project-lab")
        await create_submission(author, "Open space", category="unbounded-space")
        db.add(TagPref(user_id=reader.id, tag="cat:project-lab", weight=1))
        await db.commit()

        response = await client.get("/api/recs", headers=auth_headers("auth-reader"))

        assert [item["title"] for item in response.json()["items"]] == ["Lab notes"]

    async def test_opt_out_signals_disable_personalization(
        self,
        client: AsyncClient,
        db: AsyncSession,
        create_user,
        create_submission,
        auth_headers,
    ) -> None:
        """Test that off=1, DNT and Sec-GPC each return the generic feed."""
        reader = await create_user("reader")
        author = await create_user("kolmogorov")
        await create_submission(author, "Lab notes", category="project-lab")
        await create_submission(author, "Open space", category="unbounded-space")
        db.add(TagPref(user_id=reader.id, tag="cat:project-lab", weight=1))
        await db.commit()
        headers = auth_headers("auth-reader")

        by_query = await client.get("/api/recs", headers=headers, params={"off": "1"})
        by_dnt = await client.get("/api/recs", headers={**headers, "DNT": "1"})
        by_gpc = await client.get("/api/recs", headers={**headers, "Sec-GPC": "1"})

        for response in (by_query, by_dnt, by_gpc):
            assert len(response.json()["items"]) == 2
