"""Shared fixtures for the relay tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from config import Settings
from main import create_app

API_KEY = "test-key"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        GEMINI_API_KEY=API_KEY,
        GEMINI_API_BASE_URL="https://gemini.test/v1beta",
        GEMINI_MODEL="gemini-test",
        UPSTREAM_TIMEOUT=2.0,
    )


@pytest.fixture
def upstream_url(settings: Settings) -> str:
    return settings.upstream_url


@pytest.fixture
async def client(settings: Settings) -> AsyncIterator[AsyncClient]:
    """In-process client for the relay app with test settings."""
    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://relay") as ac:
        yield ac
