"""
Document database wiring (MongoDB) using pymongo's asyncio client.

This module owns the client. FastAPI connects it on startup and closes it on
shutdown (see `api/main.py`). A failed connection is logged and the service
keeps serving. No route reads from the database; `/health` reports whether
the startup connection succeeded (`is_connected`).
"""

from __future__ import annotations

import logging

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from . import settings

logger = logging.getLogger(__name__)

_client: AsyncMongoClient | None = None


async def init_client() -> bool:
    """
    Connect and ping. Returns False (and logs) when the server is unreachable.
    """
    global _client
    if _client is not None:
        return True

    client: AsyncMongoClient = AsyncMongoClient(
        settings.mongo_uri(),
        serverSelectionTimeoutMS=settings.mongo_timeout_ms(),
    )
    try:
        await client.admin.command("ping")
    except PyMongoError as exc:
        logger.error("Could not connect to MongoDB: %s", exc)
        await client.close()
        return False

    _client = client
    logger.info("Connected to MongoDB")
    return True


async def close_client() -> None:
    global _client
    if _client is None:
        return None
    await _client.close()
    _client = None


def is_connected() -> bool:
    return _client is not None

