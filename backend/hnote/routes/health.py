"""
hnote Backend — Liveness and Health Routes
===========================================

What:  GET / (static liveness text) and GET /health (store connectivity).
Who:   Humans poking the server, load balancers, container health checks.

Status levels for /health:
    - healthy:   note store answers a ping (HTTP 200)
    - unhealthy: note store unreachable (HTTP 503)
"""

import time

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import PlainTextResponse

from hnote import __version__
from hnote.schemas.note import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness check")
async def home() -> str:
    """Static text; never touches the store."""
    return "hello! this is hnote"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Note store unreachable", "model": HealthResponse}},
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    is_connected = await request.app.state.store.ping()
    if not is_connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if is_connected else "unhealthy",
        version=__version__,
        database="connected" if is_connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
