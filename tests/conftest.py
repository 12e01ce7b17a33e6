"""Shared fixtures: a recording httpx MockTransport and a clean environment."""

from __future__ import annotations

import pytest
import httpx

from client import FetchApi, MemoryTokenStore
from client import tokens

BASE_URL = "http://test.local"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("API_BASE_URL", "API_TIMEOUT_S", "AUTH_TOKEN_FILE", "DOWNLOAD_DIR"):
        monkeypatch.delenv(name, raising=False)
    tokens._memory_store.clear_token()
    yield
    tokens._memory_store.clear_token()


class Recorder:
    """Routes requests to `handler` and keeps every request it saw."""

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request):
        self.requests.append(request)
        result = self.handler(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_fetch():
    def _make(handler, *, token: str | None = None, base_url: str = BASE_URL):
        recorder = Recorder(handler)
        fetch = FetchApi(
            base_url,
            token_provider=MemoryTokenStore(token),
            transport=httpx.MockTransport(recorder),
        )
        return fetch, recorder

    return _make
