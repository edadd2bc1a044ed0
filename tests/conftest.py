"""
tests.conftest

Shared fixtures: an app bound to a throwaway SQLite file and an in-process HTTP client.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from bookshelf_api.api.app import create_app
from bookshelf_api.settings import Settings

TEST_SECRET = "test-secret-0123456789-abcdefghijklmnop"
DEFAULT_PASSWORD = "s3cretpass"


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "env": "test",
        "log_level": "WARNING",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'bookshelf-test.db'}",
        "jwt_secret": TEST_SECRET,
        "bcrypt_rounds": 4,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    application = create_app(settings=settings)
    # httpx ASGITransport does not drive lifespan events; enter the lifespan explicitly.
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def register(
    client: httpx.AsyncClient,
    username: str = "alice",
    *,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
) -> str:
    r = await client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]["token"]


@pytest_asyncio.fixture
async def token(client: httpx.AsyncClient) -> str:
    return await register(client)
