# exception handlers (error_id)
from __future__ import annotations

import uuid
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from server.api.logging_config import configure_logging
from server.api.services import metrics
from server.api.settings import Settings

FALLBACK_UNAVAILABLE_MESSAGE = "Failed to fetch movies. Please try again later."


def _with_request_id(request: Request, payload: dict[str, Any]) -> dict[str, Any]:
    req_id = getattr(request.state, "request_id", None)
    if isinstance(req_id, str) and req_id:
        payload["request_id"] = req_id
    return payload


def build_fallback_unavailable_handler(settings: Settings):
    logger = configure_logging(settings)

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        intent = getattr(exc, "intent", None)
        logger.error(
            "fallback_unavailable",
            extra={"intent": intent, "path": request.url.path, "cause": repr(getattr(exc, "cause", exc))},
        )
        metrics.inc("http_fallback_unavailable_total", 1)
        payload = _with_request_id(request, {"detail": FALLBACK_UNAVAILABLE_MESSAGE})
        return JSONResponse(status_code=503, content=payload)

    return handler


def build_exception_handler(settings: Settings):
    logger = configure_logging(settings)

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        error_id = uuid.uuid4().hex
        req_id = getattr(request.state, "request_id", None)

        logger.exception(
            "unhandled_exception",
            extra={"error_id": error_id, "request_id": req_id, "path": request.url.path},
        )
        metrics.inc("http_errors_5xx_total", 1)

        payload = _with_request_id(request, {"detail": "Internal Server Error", "error_id": error_id})
        return JSONResponse(status_code=500, content=payload)

    return handler


__all__ = [
    "FALLBACK_UNAVAILABLE_MESSAGE",
    "build_exception_handler",
    "build_fallback_unavailable_handler",
]
