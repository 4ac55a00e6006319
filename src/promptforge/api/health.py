"""Health check endpoint for liveness probes."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from promptforge import __version__

router = APIRouter(prefix="/health", tags=["Health"])


class LivenessResponse(BaseModel):
    status: str = "ok"
    version: str


@router.get("/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness() -> LivenessResponse:
    return LivenessResponse(version=__version__)
