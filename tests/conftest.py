"""Shared fixtures: an app backed by a throwaway SQLite database."""

import asyncio
from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from bedtime.core.config import Settings, get_settings
from bedtime.core.security import create_access_token

PARENT_SETTINGS = {
    "pin": "1234",
    "readingTimeLimit": 30,
    "fullscreenLockEnabled": True,
    "theme": "night",
}

STORY = {
    "title": "T",
    "content": "C",
    "summary": "S",
    "imageUrl": "U",
}


@pytest.fixture()
def settings(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Settings]:
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'bedtime.db'}")
    monkeypatch.setenv("CREATE_TABLES_ON_STARTUP", "true")
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("ENVIRONMENT", "test")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture()
def client(settings: Settings) -> Iterator[TestClient]:
    from bedtime.api.main import create_app

    with TestClient(create_app()) as client:
        yield client


@pytest.fixture()
def auth(settings: Settings) -> Callable[[str], dict[str, str]]:
    """Build an Authorization header for a caller id."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers


@pytest.fixture()
def make_admin(client: TestClient, auth) -> Callable[[str], dict[str, str]]:
    """Save settings for a user, flag them as admin out-of-band, return their headers."""
    from bedtime.models.database import session_scope
    from bedtime.services.admin import set_admin_flag

    async def _grant(user_id: str) -> None:
        async with session_scope() as session:
            await set_admin_flag(session, user_id, True)

    def _make(user_id: str) -> dict[str, str]:
        headers = auth(user_id)
        resp = client.post("/api/parent-settings", json=PARENT_SETTINGS, headers=headers)
        assert resp.status_code == 200
        asyncio.run(_grant(user_id))
        return headers

    return _make
