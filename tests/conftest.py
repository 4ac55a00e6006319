"""
Shared test fixtures.

Everything runs against the in-memory key-value store; provider HTTP calls
are intercepted with respx.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from promptforge.app import create_app
from promptforge.config import Settings
from promptforge.core.media.store import MediaStore
from promptforge.providers.dispatcher import ProviderDispatcher
from promptforge.schemas.providers import ProviderConfig, ProviderKind
from promptforge.services.storage import InMemoryKeyValueStore

GEMINI_BASE = "https://generativelanguage.googleapis.com"
GEMINI_HOST = "generativelanguage.googleapis.com"


# Test Settings Override

def get_test_settings() -> Settings:
    return Settings(
        env="test",
        logging={"level": "DEBUG", "format": "console"},  # type: ignore[arg-type]
        storage={"backend": "memory"},  # type: ignore[arg-type]
        video={"poll_interval_seconds": 0, "max_polls": 5},  # type: ignore[arg-type]
    )


async def no_sleep(_: float) -> None:
    return None


# Provider Fixtures

@pytest.fixture
def settings() -> Settings:
    return get_test_settings()


@pytest.fixture
def media_store() -> MediaStore:
    return MediaStore(capacity=4)


@pytest.fixture
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
async def dispatcher(
    settings: Settings, media_store: MediaStore, http_client: httpx.AsyncClient
) -> AsyncIterator[ProviderDispatcher]:
    async with ProviderDispatcher(settings, media_store, http_client, sleep=no_sleep) as d:
        yield d


@pytest.fixture
def gemini_config() -> ProviderConfig:
    return ProviderConfig(
        id="cfg-gemini",
        name="My Gemini",
        provider=ProviderKind.GEMINI,
        api_key="AIza-test-key",
        model="gemini-2.5-flash",
    )


@pytest.fixture
def openai_config() -> ProviderConfig:
    return ProviderConfig(
        id="cfg-openai",
        name="My OpenAI",
        provider=ProviderKind.OPENAI,
        api_key="sk-test",
        model="gpt-4-turbo",
    )


# App + Client Fixtures

@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
async def app(
    settings: Settings, store: InMemoryKeyValueStore, dispatcher: ProviderDispatcher
) -> AsyncIterator[FastAPI]:
    application = create_app(settings, store=store, dispatcher=dispatcher)
    # ASGITransport does not send lifespan events
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Headers carrying a session token for a freshly registered user."""
    response = await client.post(
        "/v1/auth/register", json={"email": "writer@example.com", "password": "hunter22"}
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
