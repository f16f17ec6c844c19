"""Tests for pure helpers behind listings, feeds and dashboards."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from unbounded_figures.schemas.page import ActivityItem
from unbounded_figures.services.activity import bump_tag_weights
from unbounded_figures.services.profiles import merge_activity
from unbounded_figures.services.recommendations import is_opted_out
from unbounded_figures.services.submissions import clamp_page_size
from unbounded_figures.services.users import default_username


class TestClampPageSize:
    """Tests for page size clamping."""

    @pytest.mark.parametrize(
        ("requested", "expected"),
        [(None, 20), (1, 5), (5, 5), (17, 17), (50, 50), (500, 50), (-3, 5)],
    )
    def test_clamp(self, requested: int | None, expected: int) -> None:
        """Test that limits are defaulted and clamped into 5-50."""
        assert clamp_page_size(requested) == expected


class TestIsOptedOut:
    """Tests for personalization opt-out detection."""

    def test_no_signal(self) -> None:
        """Test that plain requests are personalized."""
        assert is_opted_out(None, {}) is False

    def test_query_flag(self) -> None:
        """Test the off=1 query flag."""
        assert is_opted_out("1", {}) is True
        assert is_opted_out("0", {}) is False

    def test_privacy_headers(self) -> None:
        """Test Do Not Track and Global Privacy Control headers."""
        assert is_opted_out(None, {"dnt": "1"}) is True
        assert is_opted_out(None, {"sec-gpc": "1"}) is True
        assert is_opted_out(None, {"dnt": "0"}) is False


class TestMergeActivity:
    """Tests for merging submission and comment events."""

    def test_newest_first_with_comment_before_submission_on_ties(self) -> None:
        """Test ordering by time, then comments first, then higher id first."""
        same = datetime(2026, 5, 5, 10, 0)
        items = [
            ActivityItem(type="submission", id=1, created_at=datetime(2026, 5, 1), title="Old"),
            ActivityItem(type="submission", id=7, created_at=same, title="Tied post"),
            ActivityItem(type="comment", id=2, created_at=same, title="Tied comment"),
            ActivityItem(type="comment", id=3, created_at=same, title="Tied comment 2"),
            ActivityItem(type="submission", id=9, created_at=datetime(2026, 5, 6), title="New"),
        ]

        merged = merge_activity(items)

        assert [(i.type, i.id) for i in merged] == [
            ("submission", 9),
            ("comment", 3),
            ("comment", 2),
            ("submission", 7),
            ("submission", 1),
        ]


def test_default_username_uses_subject_prefix() -> None:
    """Test that new users are named after the first eight subject characters."""
    assert default_username("a1b2c3d4e5f6") == "figure_a1b2c3d4"
    assert default_username("abc") == "figure_abc"


class TestBumpTagWeights:
    """Tests for the tag weight upsert outside a real database."""

    async def test_unsupported_dialect_raises(self) -> None:
        """Test that databases without a known upsert are refused."""
        db = MagicMock()
        db.get_bind.return_value.dialect.name = "mysql"
        db.execute = AsyncMock()

        with pytest.raises(NotImplementedError, match="not supported on mysql"):
            await bump_tag_weights(db, 1, ["algebra"])

        db.execute.assert_not_called()

    async def test_no_tags_is_a_no_op(self) -> None:
        """Test that an empty tag list issues no statement."""
        db = MagicMock()
        db.execute = AsyncMock()

        await bump_tag_weights(db, 1, [])

        db.execute.assert_not_called()
