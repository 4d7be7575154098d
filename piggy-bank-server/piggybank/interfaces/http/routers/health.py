"""Liveness endpoint."""

from fastapi import APIRouter

from piggybank import __version__
from piggybank.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
