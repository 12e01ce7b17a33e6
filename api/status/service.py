"""
Status payloads. Static apart from the timestamp and the configured version.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import settings

from . import schemas

STATUS_MESSAGE = "Backend is RUNNING"
HOME_MESSAGE = "Hello from the Backend Container!"


def current_status() -> schemas.StatusResponse:
    return schemas.StatusResponse(
        message=STATUS_MESSAGE,
        timestamp=datetime.now(timezone.utc),
        v=settings.status_version(),
    )


def home() -> schemas.HomeResponse:
    return schemas.HomeResponse(message=HOME_MESSAGE)
