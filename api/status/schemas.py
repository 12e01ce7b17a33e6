"""
Pydantic schemas for the status endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class StatusResponse(BaseModel):
    message: str
    timestamp: datetime
    v: str


class HomeResponse(BaseModel):
    message: str
