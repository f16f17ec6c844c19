"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set test environment variables before importing the app
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret-for-identity-tokens-at-least-32-chars")
os.environ.setdefault("AUTH_PROVIDER_URL", "")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from unbounded_figures.config import get_settings
from unbounded_figures.database import Base, get_db
from unbounded_figures.main import app
from unbounded_figures.models.submission import Submission, SubmissionTag
from unbounded_figures.models.user import User


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Session factory bound to a fresh SQLite database file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession]:
    """Session for seeding data and inspecting results outside requests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


def _make_token(subject: str, email: str | None = None, expires_in: int = 3600) -> str:
    """Mint an identity token the way the identity provider would."""
    settings = get_settings()
    claims = {
        "sub": subject,
        "aud": settings.auth_jwt_audience,
        "exp": datetime.now(UTC) + timedelta(seconds=expires_in),
        "role": "authenticated",
    }
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)


def _auth_headers(subject: str, email: str | None = None) -> dict[str, str]:
    """Authorization header for a provider subject."""
    return {"Authorization": f"Bearer {_make_token(subject, email)}"}


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory minting provider-style identity tokens."""
    return _make_token


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Factory building Authorization headers for a provider subject."""
    return _auth_headers


@pytest.fixture
def create_user(db: AsyncSession) -> Callable:
    """Factory inserting a local user bridged to ``auth-<username>``."""

    async def _create(username: str, **kwargs) -> User:
        user = User(
            auth_id=kwargs.pop("auth_id", f"auth-{username}"),
            username=username,
            display_name=kwargs.pop("display_name", username.title()),
            **kwargs,
        )
        db.add(user)
        await db.commit()
        return user

    return _create


@pytest.fixture
def create_submission(db: AsyncSession) -> Callable:
    """Factory inserting a submission with explicit timestamps and tags."""

    async def _create(
        author: User,
        title: str = "A figure",
        *,
        tags: list[str] | None = None,
        category: str = "unbounded-space",
        visibility: str = "PUBLIC",
        created_at: datetime | None = None,
        allow_comments: bool = True,
    ) -> Submission:
        submission = Submission(
            author_id=author.id,
            title=title,
            content="Let x be a figure.",
            category=category,
            visibility=visibility,
            allow_comments=allow_comments,
            upvotes=0,
            created_at=created_at or datetime(2026, 1, 1, 12, 0, 0),
            tag_links=[SubmissionTag(tag=tag, position=i) for i, tag in enumerate(tags or [])],
        )
        db.add(submission)
        await db.commit()
        return submission

    return _create
