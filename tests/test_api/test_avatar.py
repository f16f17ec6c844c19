"""Tests for avatar uploads."""

from pathlib import Path

import pytest
from httpx import AsyncClient

from unbounded_figures.config import Settings, get_settings
from unbounded_figures.main import app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def avatar_dir(tmp_path) -> Path:
    """Point avatar storage at a temporary directory with a 1 KiB limit."""
    directory = tmp_path / "avatars"
    app.dependency_overrides[get_settings] = lambda: Settings(
        debug=True, avatar_dir=str(directory), avatar_max_bytes=1024
    )
    return directory


class TestAvatarUpload:
    """Tests for POST /api/profile/avatar."""

    async def test_upload_avatar(
        self, client: AsyncClient, avatar_dir: Path, create_user, auth_headers
    ) -> None:
        """Test that a PNG is stored and its served path returned."""
        await create_user("escher")

        response = await client.post(
            "/api/profile/avatar",
            headers=auth_headers("auth-escher"),
            files={"avatar": ("me.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("/avatars/")
        assert url.endswith(".png")
        stored = avatar_dir / url.rsplit("/", 1)[-1]
        assert stored.read_bytes() == PNG_BYTES

    async def test_upload_too_large(
        self, client: AsyncClient, avatar_dir: Path, create_user, auth_headers
    ) -> None:
        """Test that files over the size limit are rejected with 413."""
        await create_user("escher")

        response = await client.post(
            "/api/profile/avatar",
            headers=auth_headers("auth-escher"),
            files={"avatar": ("big.png", b"\x00" * 2048, "image/png")},
        )

        assert response.status_code == 413
        assert not avatar_dir.exists() or not any(avatar_dir.iterdir())

    async def test_upload_wrong_type(
        self, client: AsyncClient, avatar_dir: Path, create_user, auth_headers
    ) -> None:
        """Test that non-image uploads are rejected."""
        await create_user("escher")

        response = await client.post(
            "/api/profile/avatar",
            headers=auth_headers("auth-escher"),
            files={"avatar": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Unsupported file type: text/plain"

    async def test_upload_missing_file(
        self, client: AsyncClient, avatar_dir: Path, create_user, auth_headers
    ) -> None:
        """Test that a request without a file is rejected."""
        await create_user("escher")

        response = await client.post(
            "/api/profile/avatar",
            headers=auth_headers("auth-escher"),
            files={"other": ("x.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"

    async def test_upload_requires_authentication(
        self, client: AsyncClient, avatar_dir: Path
    ) -> None:
        """Test that anonymous uploads are refused."""
        response = await client.post(
            "/api/profile/avatar", files={"avatar": ("me.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 401
        assert not avatar_dir.exists()
