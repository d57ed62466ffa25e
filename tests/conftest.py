"""
Pytest configuration and fixtures for photo server tests
"""

import os
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

# Ensure test-friendly environment prior to importing the app
os.environ.setdefault("APP_ENV", "test")

from photoserver.config import Settings  # noqa: E402
from photoserver.main import create_app  # noqa: E402
from photoserver.models import Photo  # noqa: E402


@pytest.fixture
def photos_root(tmp_path: Path) -> Path:
    root = tmp_path / "photos"
    root.mkdir()
    return root


@pytest.fixture
def make_image(photos_root: Path):
    """Write a solid-colour image under the photos root and return its path."""

    def _make(relative: str, size=(200, 100), color=(200, 40, 40), fmt="JPEG", mode="RGB", **save_kwargs) -> Path:
        path = photos_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        fill = color if mode != "RGBA" else color + (128,)
        Image.new(mode, size, fill).save(path, format=fmt, **save_kwargs)
        return path

    return _make


@pytest.fixture
def test_settings(photos_root: Path) -> Settings:
    return Settings(
        DATABASE_URL="sqlite://:memory:",
        DB_GENERATE_SCHEMAS=True,
        PHOTOS_ROOT=str(photos_root),
        LFU_CACHE_MAX_COUNT=8,
        CONCURRENCY_LEVEL=2,
        METRICS_ENABLED=True,
    )


@pytest.fixture
async def app(test_settings: Settings):
    """App with a fresh in-memory SQLite catalogue; lifespan runs around each test."""
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def add_photo(app):
    async def _add(photo_id: int, path: str, rotation: int = 0, modified: str = "2024-05-01 12:00:00") -> Photo:
        return await Photo.create(id=photo_id, path=path, rotation=rotation, modified_timestamp=modified)

    return _add
