from __future__ import annotations

import logging
import os
import platform
import time
from typing import Any, Dict

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse

from golfbets.errors import ConfigurationError, InvariantViolation
from golfbets.metrics import BUILD_VERSION, GIT_SHA, MetricsMiddleware, metrics_app
from golfbets.routes.leaderboard import router as leaderboard_router

logger = logging.getLogger(__name__)

app = FastAPI(title="golfbets")
app.add_middleware(MetricsMiddleware)


@app.exception_handler(ConfigurationError)
async def _configuration_error(_request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": "configuration"},
    )


@app.exception_handler(InvariantViolation)
async def _invariant_violation(_request: Request, exc: InvariantViolation) -> JSONResponse:
    logger.error("invariant %s failed: %s", exc.invariant, exc.detail)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.detail, "error": "invariant", "invariant": exc.invariant},
    )


async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "ts": time.time(),
        "env": {
            "require_api_key": os.getenv("REQUIRE_API_KEY", "0") == "1",
        },
        "runtime": {
            "python": platform.python_version(),
        },
    }


app.add_api_route(
    "/health",
    health,
    methods=["GET"],
    response_model=None,
    tags=["health"],
)

_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)
app.include_router(leaderboard_router)


__all__ = ["app"]
