"""
HTTP client facade for the status service (and any JSON API under `/api`).
"""

from .api import Api
from .fetch_api import (
    ApiError,
    BatchRequest,
    DispatchError,
    FetchApi,
    FormData,
    NetworkError,
    RequestOptions,
    ServerError,
)
from .tokens import FileTokenStore, MemoryTokenStore, default_token_store

__all__ = [
    "Api",
    "ApiError",
    "BatchRequest",
    "DispatchError",
    "FetchApi",
    "FileTokenStore",
    "FormData",
    "MemoryTokenStore",
    "NetworkError",
    "RequestOptions",
    "ServerError",
    "default_token_store",
]
