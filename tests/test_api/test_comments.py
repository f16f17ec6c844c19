"""Tests for comment API endpoints."""

from datetime import datetime

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.models.submission import Comment


class TestCreateComment:
    """Tests for posting comments."""

    async def test_create_comment(
        self, client: AsyncClient, create_user, create_submission, auth_headers
    ) -> None:
        """Test commenting on a submission."""
        author = await create_user("poincare")
        await create_user("perelman")
        submission = await create_submission(author, "Conjecture")

        response = await client.post(
            "/api/comments",
            headers=auth_headers("auth-perelman"),
            json={"submissionId": submission.id, "content": "Solved, see arXiv."},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["content"] == "Solved, see arXiv."
        assert data["submissionId"] == submission.id
        assert data["author"]["username"] == "perelman"

    async def test_comments_disabled(
        self, client: AsyncClient, create_user, create_submission, auth_headers
    ) -> None:
        """Test that submissions with comments off reject new comments."""
        author = await create_user("wiles")
        submission = await create_submission(author, "Quiet please", allow_comments=False)

        response = await client.post(
            "/api/comments",
            headers=auth_headers("auth-wiles"),
            json={"submissionId": submission.id, "content": "First!"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Comments are disabled for this submission"

    async def test_comment_on_missing_submission(
        self, client: AsyncClient, create_user, auth_headers
    ) -> None:
        """Test that commenting on an unknown submission returns 404."""
        await create_user("wiles")

        response = await client.post(
            "/api/comments",
            headers=auth_headers("auth-wiles"),
            json={"submissionId": 31337, "content": "Hello?"},
        )

        assert response.status_code == 404

    async def test_blank_comment_rejected(
        self, client: AsyncClient, create_user, create_submission, auth_headers
    ) -> None:
        """Test that whitespace-only comments fail validation."""
        author = await create_user("wiles")
        submission = await create_submission(author)

        response = await client.post(
            "/api/comments",
            headers=auth_headers("auth-wiles"),
            json={"submissionId": submission.id, "content": "   "},
        )

        assert response.status_code == 400

    async def test_comment_requires_authentication(
        self, client: AsyncClient, create_user, create_submission
    ) -> None:
        """Test that anonymous callers cannot comment."""
        author = await create_user("wiles")
        submission = await create_submission(author)

        response = await client.post(
            "/api/comments", json={"submissionId": submission.id, "content": "Anon"}
        )

        assert response.status_code == 401


class TestListComments:
    """Tests for listing comments."""

    async def test_list_comments_oldest_first(
        self,
        client: AsyncClient,
        db: AsyncSession,
        create_user,
        create_submission,
    ) -> None:
        """Test that comments are returned in ascending creation order."""
        author = await create_user("erdos")
        submission = await create_submission(author, "Open problems")
        db.add_all(
            [
                Comment(
                    content="Later",
                    submission_id=submission.id,
                    author_id=author.id,
                    created_at=datetime(2026, 2, 2),
                ),
                Comment(
                    content="Earlier",
                    submission_id=submission.id,
                    author_id=author.id,
                    created_at=datetime(2026, 2, 1),
                ),
            ]
        )
        await db.commit()

        response = await client.get(f"/api/comments/{submission.id}")

        assert response.status_code == 200
        assert [c["content"] for c in response.json()] == ["Earlier", "Later"]

    async def test_list_comments_empty(
        self, client: AsyncClient, create_user, create_submission
    ) -> None:
        """Test listing a submission without comments."""
        author = await create_user("erdos")
        submission = await create_submission(author)

        response = await client.get(f"/api/comments/{submission.id}")

        assert response.status_code == 200
        assert response.json() == []
