"""
Client-side request/response models for the convenience API.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class StatusResponse(BaseModel):
    message: str
    timestamp: datetime
    v: str
