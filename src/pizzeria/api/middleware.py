"""HTTP middleware: request telemetry and the CORS origin guard."""

import json
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from pizzeria.telemetry import get_metrics
from pizzeria.telemetry.logs import log_http
from pizzeria.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)


class RequestTelemetryMiddleware(BaseHTTPMiddleware):
    """Times every request, counts it, and ships an ``http`` log record.

    Also binds ``request_id``, method and path into the structlog context and
    echoes the request id in the ``X-Request-ID`` response header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        clear_context()
        add_context(request_id=request_id, method=request.method, path=request.url.path)

        body = None
        if "application/json" in request.headers.get("content-type", ""):
            raw = await request.body()
            try:
                body = json.loads(raw) if raw else None
            except ValueError:
                body = None

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            latency_ms = (time.perf_counter() - start) * 1000
            get_metrics().track_request(request.method, request.url.path, latency_ms)
            log_http(
                request.method,
                request.url.path,
                status_code,
                has_auth=bool(request.headers.get("authorization")),
                latency_ms=latency_ms,
                request_body=body,
            )
            logger.info("request_completed", status=status_code, latency_ms=round(latency_ms, 2))

        response.headers["X-Request-ID"] = request_id
        return response


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose ``Origin`` is not on the allow list with 403."""

    def __init__(self, app: ASGIApp, allowed_origins: list[str]):
        super().__init__(app)
        self.allowed_origins = allowed_origins

    def is_allowed(self, origin: str | None) -> bool:
        if not origin or "*" in self.allowed_origins:
            return True
        return origin in self.allowed_origins

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if not self.is_allowed(origin):
            logger.warning("origin_rejected", origin=origin)
            return JSONResponse(status_code=403, content={"message": "CORS error: Origin not allowed"})
        return await call_next(request)
