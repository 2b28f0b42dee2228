from __future__ import annotations

"""
server/api/middleware/request_id.py

Middleware:
- Inyecta/propaga X-Request-ID
- Cuenta requests por clase de status y observa la latencia (api.request.latency_ms)
- Log por request (duración + status)
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from backend.run_metrics import METRICS
from server.api.logging_config import configure_logging
from server.api.services import metrics
from server.api.settings import Settings

CallNext = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, CallNext], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"


def _status_class(status_code: int) -> str:
    return f"{max(1, min(5, status_code // 100))}xx"


def build_request_id_middleware(settings: Settings) -> Middleware:
    logger = configure_logging(settings)

    async def middleware(request: Request, call_next: CallNext) -> Response:
        start = time.monotonic()
        req_id = (request.headers.get(REQUEST_ID_HEADER) or "").strip() or uuid.uuid4().hex
        request.state.request_id = req_id

        metrics.inc("http_requests_total", 1)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = int(response.status_code)
            response.headers[REQUEST_ID_HEADER] = req_id
            return response
        finally:
            elapsed_ms = (time.monotonic() - start) * 1000.0
            metrics.inc(f"http_responses_{_status_class(status_code)}_total", 1)
            METRICS.observe_ms("api.request.latency_ms", elapsed_ms)
            logger.info(
                "request",
                extra={
                    "request_id": req_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": status_code,
                    "duration_ms": int(elapsed_ms),
                },
            )

    return middleware
