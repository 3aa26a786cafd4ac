from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from gemini_proxy.config import Settings
from gemini_proxy.main import create_app
from gemini_proxy.proxy import Forwarder

API_KEY = "test-key"
MODEL_ID = "gemini-2.0-flash"
API_ENDPOINT = "streamGenerateContent"
UPSTREAM_URL = (
    f"https://generativelanguage.googleapis.com/v1beta/models/{MODEL_ID}:{API_ENDPOINT}?key={API_KEY}"
)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key=API_KEY)


@pytest.fixture
async def forwarder(settings: Settings) -> AsyncIterator[Forwarder]:
    """Forwarder over a real httpx client for respx mocking."""
    async with httpx.AsyncClient() as http:
        yield Forwarder(settings, http)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def keyless_client() -> Iterator[TestClient]:
    with TestClient(create_app(Settings(api_key=""))) as c:
        yield c
