"""
Status API endpoints, mounted under `/api`.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter(prefix="/api")


@router.get("/status", response_model=schemas.StatusResponse)
async def get_status() -> schemas.StatusResponse:
    return service.current_status()


@router.get("/home", response_model=schemas.HomeResponse)
async def get_home() -> schemas.HomeResponse:
    return service.home()
