from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Dict

import pytest
import pytest_asyncio

from tavno.api import deps
from tavno.api.main import app
from tavno.infra.ai.offline import OfflineTextGenerator
from tavno.infra.settings import Settings
from tavno.infra.store import MemoryPersistence

TEST_ADMIN_TOKEN = "test-admin-token"


@pytest.fixture(autouse=True)
def configure_app_dependencies(tmp_path) -> MemoryPersistence:
    # Rebuild FastAPI dependency singletons against a fresh in-memory store.
    persistence = MemoryPersistence()
    deps.configure(
        Settings(
            store_backend="memory",
            seed_demo_data=False,
            upload_dir=tmp_path / "uploads",
            activity_log_file=tmp_path / "logs" / "suspicious_activities.log",
            admin_token=TEST_ADMIN_TOKEN,
        ),
        persistence=persistence,
        text_generator=OfflineTextGenerator(),
    )
    return persistence


@pytest_asyncio.fixture()
async def api_client() -> AsyncIterator[Any]:
    from httpx import ASGITransport, AsyncClient

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture()
def admin_headers() -> Dict[str, str]:
    return {"X-Admin-Token": TEST_ADMIN_TOKEN}


@pytest.fixture()
def signup(api_client):
    """Register an account and return ``(profile, auth headers)``."""

    async def _signup(username: str, password: str = "secret1") -> tuple[Dict[str, Any], Dict[str, str]]:
        response = await api_client.post(
            "/auth/signup",
            json={
                "email": f"{username.lower()}@example.com",
                "password": password,
                "confirmPassword": password,
                "username": username,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body, {"Authorization": f"Bearer {body['token']}"}

    return _signup


@pytest.fixture()
def post_quest(api_client):
    async def _post(headers: Dict[str, str], **fields: Any) -> Dict[str, Any]:
        data = {
            "title": "Walk my dog",
            "description": "Around the block",
            "category": "Pets",
            "reward": "100",
            "slots": "1",
        }
        data.update({k: str(v) for k, v in fields.items()})
        response = await api_client.post("/quests", data=data, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _post
