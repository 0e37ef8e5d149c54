"""HTTP readiness endpoint for the request-processing pool."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from src.poolcheck.runtime.service import get_health_service

app = FastAPI(title="poolcheck")


class ReadinessResponse(BaseModel):
    ready: bool
    utilization_ratio: float | None = None
    current_size: int | None = None
    max_pool_size: int
    error: str | None = None


def _status_code(ready: bool) -> int:
    return 200 if ready else 503


@app.on_event("startup")
def _init_health_service() -> None:
    # Loads settings; a misconfigured pool ceiling fails startup here.
    get_health_service()


@app.get("/health", response_class=PlainTextResponse)
def health() -> PlainTextResponse:
    result = get_health_service().check()
    return PlainTextResponse("true" if result.ready else "false", status_code=_status_code(result.ready))


@app.get("/health/details", response_model=ReadinessResponse)
def health_details() -> JSONResponse:
    payload = ReadinessResponse(**get_health_service().health())
    return JSONResponse(payload.model_dump(), status_code=_status_code(payload.ready))
