"""Prometheus registry and HTTP instrumentation for the leaderboard API."""

from __future__ import annotations

import os
import time
from typing import Any, Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()
HTTP_REQUESTS = Counter(
    "golfbets_http_requests_total",
    "HTTP requests served",
    ["route", "method", "status"],
    registry=REGISTRY,
)
HTTP_LATENCY = Histogram(
    "golfbets_http_request_seconds",
    "HTTP request latency (seconds)",
    ["route", "method"],
    registry=REGISTRY,
)

BUILD_VERSION = os.getenv("BUILD_VERSION", "dev")
GIT_SHA = os.getenv("GIT_SHA", "unknown")

_UNTRACKED_PATHS = frozenset({"/metrics"})


async def metrics_app(_req: Request | None = None) -> Response:
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def _route_label(scope: dict[str, Any]) -> str:
    # Route template, not the raw path.
    route = scope.get("route")
    template = getattr(route, "path", None)
    return template or "unmatched"


class MetricsMiddleware:
    def __init__(self, app: Callable[..., Awaitable[Any]]):
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Awaitable[Any]],
        send: Callable[..., Awaitable[Any]],
    ) -> None:
        if scope.get("type") != "http" or scope.get("path") in _UNTRACKED_PATHS:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        started = time.perf_counter()
        status_code = 500

        async def _send(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, _send)
        finally:
            route = _route_label(scope)
            HTTP_LATENCY.labels(route=route, method=method).observe(
                time.perf_counter() - started
            )
            HTTP_REQUESTS.labels(route=route, method=method, status=str(status_code)).inc()


__all__ = [
    "BUILD_VERSION",
    "GIT_SHA",
    "HTTP_LATENCY",
    "HTTP_REQUESTS",
    "MetricsMiddleware",
    "REGISTRY",
    "metrics_app",
]
