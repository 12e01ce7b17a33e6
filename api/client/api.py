"""
Convenience helpers over FetchApi for common endpoints.

This layer owns the auth token lifecycle: `login` stores the token returned by
the server, `logout` clears it. FetchApi itself only reads it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .fetch_api import DispatchError, FetchApi, FormData, ParamValue, RequestOptions
from .schemas import LoginRequest, StatusResponse
from .tokens import TokenStore, default_token_store

logger = logging.getLogger(__name__)


def _extract_token(payload: Any) -> str | None:
    """
    Accept `token`, `access_token`, or `tokens.access_token`.
    """
    if not isinstance(payload, dict):
        return None
    for key in ("token", "access_token"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    tokens = payload.get("tokens")
    if isinstance(tokens, dict):
        value = tokens.get("access_token")
        if isinstance(value, str) and value:
            return value
    return None


def _params(params: Mapping[str, ParamValue] | None) -> RequestOptions:
    return RequestOptions(params=params)


class Api:
    def __init__(self, fetch: FetchApi | None = None, *, token_store: TokenStore | None = None) -> None:
        self.token_store = token_store if token_store is not None else default_token_store()
        self.fetch = fetch if fetch is not None else FetchApi(token_provider=self.token_store)

    # Users
    async def get_users(self, params: Mapping[str, ParamValue] | None = None) -> Any:
        return await self.fetch.get("/users", _params(params))

    async def get_user(self, user_id: str | int) -> Any:
        return await self.fetch.get(f"/users/{user_id}")

    async def create_user(self, user_data: Mapping[str, Any]) -> Any:
        return await self.fetch.post("/users", dict(user_data))

    async def update_user(self, user_id: str | int, user_data: Mapping[str, Any]) -> Any:
        return await self.fetch.put(f"/users/{user_id}", dict(user_data))

    async def partial_update_user(self, user_id: str | int, user_data: Mapping[str, Any]) -> Any:
        return await self.fetch.patch(f"/users/{user_id}", dict(user_data))

    async def delete_user(self, user_id: str | int) -> Any:
        return await self.fetch.delete(f"/users/{user_id}")

    # Auth
    async def login(self, email: str, password: str) -> Any:
        try:
            credentials = LoginRequest(email=email, password=password)
        except ValidationError as exc:
            raise DispatchError(f"Invalid credentials payload: {exc.error_count()} error(s)") from exc

        result = await self.fetch.post("/auth/login", credentials.model_dump())
        token = _extract_token(result)
        if token:
            self.token_store.set_token(token)
        else:
            logger.warning("Login response carried no token; requests stay anonymous.")
        return result

    async def register(self, user_data: Mapping[str, Any]) -> Any:
        return await self.fetch.post("/auth/register", dict(user_data))

    async def logout(self) -> Any:
        try:
            return await self.fetch.post("/auth/logout")
        finally:
            self.token_store.clear_token()

    async def refresh_token(self) -> Any:
        # No expiry tracking; the server decides whether a new token is issued.
        result = await self.fetch.post("/auth/refresh")
        token = _extract_token(result)
        if token:
            self.token_store.set_token(token)
        return result

    # Generic CRUD
    async def list(self, endpoint: str, params: Mapping[str, ParamValue] | None = None) -> Any:
        return await self.fetch.get(endpoint, _params(params))

    async def get(self, endpoint: str) -> Any:
        return await self.fetch.get(endpoint)

    async def create(self, endpoint: str, data: Any) -> Any:
        return await self.fetch.post(endpoint, data)

    async def update(self, endpoint: str, data: Any) -> Any:
        return await self.fetch.put(endpoint, data)

    async def partial_update(self, endpoint: str, data: Any) -> Any:
        return await self.fetch.patch(endpoint, data)

    async def remove(self, endpoint: str) -> Any:
        return await self.fetch.delete(endpoint)

    # Files
    async def upload(self, endpoint: str, form: FormData) -> Any:
        return await self.fetch.upload(endpoint, form)

    async def download(
        self,
        endpoint: str,
        filename: str | None = None,
        *,
        directory: str | Path | None = None,
    ) -> Path | None:
        return await self.fetch.download(endpoint, filename, directory=directory)

    # Status service
    async def status(self) -> StatusResponse:
        payload = await self.fetch.get("/status")
        return StatusResponse.model_validate(payload)

    async def home(self) -> Any:
        return await self.fetch.get("/home")
