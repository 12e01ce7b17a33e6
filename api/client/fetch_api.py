"""
HTTP client facade for JSON APIs rooted at `<base>/api/`.

Every call:
- builds `<base>/api/<endpoint>?<params>`
- merges default headers (JSON content type, bearer token) with caller headers
- sends the request through a short-lived httpx.AsyncClient
- returns the decoded body, or raises one of the ApiError variants

Callers only ever need to catch ApiError; httpx exceptions never escape.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import urlencode

import httpx

from core import settings

from .tokens import default_token_store

logger = logging.getLogger(__name__)

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
BODYLESS_METHODS = ("GET", "DELETE")

NETWORK_ERROR_MESSAGE = "Network error - no response received"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"
DEFAULT_DOWNLOAD_NAME = "download"

ParamValue = str | int | float | bool


class ApiError(RuntimeError):
    """
    Normalized failure of any facade call.

    `status_code` is the HTTP status when a response arrived, else 0.
    """

    def __init__(self, message: str, status_code: int = 0, body: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class ServerError(ApiError):
    pass


class NetworkError(ApiError):
    def __init__(self) -> None:
        super().__init__(NETWORK_ERROR_MESSAGE, 0)


class DispatchError(ApiError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or UNKNOWN_ERROR_MESSAGE, 0)


class TokenProvider(Protocol):
    def get_token(self) -> str | None: ...


@dataclass(frozen=True)
class RequestOptions:
    params: Mapping[str, ParamValue] | None = None
    headers: Mapping[str, str] | None = None
    # Seconds. None means no timeout.
    timeout: float | None = None

    @classmethod
    def coerce(cls, value: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
        if value is None:
            return cls()
        if isinstance(value, RequestOptions):
            return value
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(value) - known)
        if unknown:
            raise DispatchError(f"Unsupported request option(s): {', '.join(unknown)}")
        return cls(**value)


@dataclass(frozen=True)
class BatchRequest:
    endpoint: str
    method: str = "GET"
    body: Any = None
    options: RequestOptions | Mapping[str, Any] | None = None

    @classmethod
    def coerce(cls, value: BatchRequest | Mapping[str, Any]) -> BatchRequest:
        if isinstance(value, BatchRequest):
            return value
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(value) - known)
        if unknown:
            raise DispatchError(f"Unsupported batch field(s): {', '.join(unknown)}")
        if "endpoint" not in value:
            raise DispatchError("Batch request is missing an endpoint.")
        return cls(**value)


class FormData:
    """
    Ordered multipart entries, in the spirit of the browser FormData object.

    Plain fields are sent without a filename; files carry one.
    """

    def __init__(self) -> None:
        self.entries: list[tuple[str, tuple[Any, ...]]] = []

    def append(
        self,
        name: str,
        value: str | bytes,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> FormData:
        if filename is None:
            self.entries.append((name, (None, value)))
        elif content_type is None:
            self.entries.append((name, (filename, value)))
        else:
            self.entries.append((name, (filename, value, content_type)))
        return self

    def __len__(self) -> int:
        return len(self.entries)


def _param_value(value: ParamValue) -> str:
    # Match the JSON rendering of booleans rather than Python's "True"/"False".
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _decode_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _server_error(resp: httpx.Response) -> ServerError:
    status = resp.status_code
    body = _decode_body(resp)
    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str) or not message:
        message = f"HTTP error! status: {status}"
    return ServerError(message, status, body)


class FetchApi:
    """
    Request construction, dispatch, and error normalization for one API.

    `token_provider` is read once per request and never written.
    `transport` is handed to httpx; tests pass httpx.MockTransport or
    httpx.ASGITransport.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout_s: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url()).strip().rstrip("/")
        self.token_provider = token_provider if token_provider is not None else default_token_store()
        self.transport = transport
        self.timeout_s = timeout_s if timeout_s is not None else settings.api_timeout_s()

    # Request construction ------------------------------------------------

    def build_url(self, endpoint: str, params: Mapping[str, ParamValue] | None = None) -> str:
        url = f"{self.base_url}/api/{(endpoint or '').lstrip('/')}"
        if params:
            query = urlencode([(str(key), _param_value(value)) for key, value in params.items()])
            url = f"{url}?{query}"
        return url

    def default_headers(self, custom: Mapping[str, str] | None = None) -> httpx.Headers:
        headers = httpx.Headers({"Content-Type": "application/json"})
        token = self.token_provider.get_token()
        try:
            if token:
                headers["Authorization"] = f"Bearer {token}"
            if custom:
                # Case-insensitive replace: caller values win.
                headers.update(custom)
        except (TypeError, ValueError) as exc:
            # Non-ASCII or non-str header values.
            raise DispatchError(str(exc)) from exc
        return headers

    # Dispatch ---------------------------------------------------------------

    async def _send(
        self,
        method: str,
        url: str,
        headers: httpx.Headers,
        timeout: float | None,
        **content: Any,
    ) -> httpx.Response:
        extra: dict[str, Any] = {}
        timeout = timeout if timeout is not None else self.timeout_s
        if timeout is not None:
            extra["timeout"] = timeout

        async with httpx.AsyncClient(transport=self.transport, timeout=None) as client:
            try:
                request = client.build_request(method, url, headers=headers, **content, **extra)
            except (httpx.InvalidURL, TypeError, ValueError) as exc:
                raise DispatchError(str(exc)) from exc

            logger.debug("%s %s", method, url)
            try:
                resp = await client.send(request)
            except (httpx.UnsupportedProtocol, httpx.LocalProtocolError) as exc:
                raise DispatchError(str(exc)) from exc
            except httpx.TransportError as exc:
                logger.warning("%s %s: no response (%s)", method, url, type(exc).__name__)
                raise NetworkError() from exc

        if not resp.is_success:
            raise _server_error(resp)
        return resp

    async def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        opts = RequestOptions.coerce(options)
        verb = (method or "").upper()
        if verb not in METHODS:
            raise DispatchError(f"Unsupported method: {method}")

        url = self.build_url(endpoint, opts.params)
        headers = self.default_headers(opts.headers)

        content: dict[str, Any] = {}
        if body is not None and verb not in BODYLESS_METHODS:
            content["json"] = body

        resp = await self._send(verb, url, headers, opts.timeout, **content)
        return _decode_body(resp)

    async def get(self, endpoint: str, options: RequestOptions | Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", endpoint, options=options)

    async def post(
        self, endpoint: str, body: Any = None, options: RequestOptions | Mapping[str, Any] | None = None
    ) -> Any:
        return await self.request("POST", endpoint, body, options)

    async def put(
        self, endpoint: str, body: Any = None, options: RequestOptions | Mapping[str, Any] | None = None
    ) -> Any:
        return await self.request("PUT", endpoint, body, options)

    async def patch(
        self, endpoint: str, body: Any = None, options: RequestOptions | Mapping[str, Any] | None = None
    ) -> Any:
        return await self.request("PATCH", endpoint, body, options)

    async def delete(self, endpoint: str, options: RequestOptions | Mapping[str, Any] | None = None) -> Any:
        return await self.request("DELETE", endpoint, options=options)

    # Composites ---------------------------------------------------------------

    async def upload(
        self,
        endpoint: str,
        form: FormData,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        """
        POST a multipart body. httpx writes the Content-Type with its boundary.
        """
        if not len(form):
            raise DispatchError("Upload form is empty.")
        opts = RequestOptions.coerce(options)
        url = self.build_url(endpoint, opts.params)
        headers = self.default_headers(opts.headers)
        headers.pop("Content-Type", None)

        resp = await self._send("POST", url, headers, opts.timeout, files=list(form.entries))
        return _decode_body(resp)

    async def batch(self, requests: Sequence[BatchRequest | Mapping[str, Any]]) -> list[Any]:
        """
        Run all requests concurrently; results follow input order.

        The first failure wins: remaining in-flight requests are cancelled and
        the error is raised. No partial results are returned.
        """
        items = [BatchRequest.coerce(item) for item in requests]
        if not items:
            return []

        tasks = [
            asyncio.ensure_future(self.request(item.method, item.endpoint, item.body, item.options))
            for item in items
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            # Collect every sibling outcome so no task exception goes unretrieved.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def download(
        self,
        endpoint: str,
        filename: str | None = None,
        *,
        directory: str | Path | None = None,
    ) -> Path | None:
        """
        GET raw bytes and save them to disk. Failures are logged, not raised.
        """
        url = self.build_url(endpoint)
        try:
            resp = await self._send("GET", url, self.default_headers(), None)
        except ApiError as exc:
            logger.error("Download of %s failed (%s): %s", url, exc.status_code, exc.message)
            return None

        target_dir = Path(directory if directory is not None else settings.download_dir())
        target_dir.mkdir(parents=True, exist_ok=True)
        # Keep only the last path component so the file stays inside target_dir.
        name = Path(filename).name if filename else ""
        if name in ("", ".", ".."):
            name = DEFAULT_DOWNLOAD_NAME
        target = target_dir / name
        target.write_bytes(resp.content)
        logger.info("Saved %s (%d bytes)", target, len(resp.content))
        return target
