import asyncio
import json

from fastapi import Request, Response

from backend.errors import FallbackUnavailableError
from server.api.middleware.errors import (
    FALLBACK_UNAVAILABLE_MESSAGE,
    build_exception_handler,
    build_fallback_unavailable_handler,
)
from server.api.middleware.request_id import build_request_id_middleware
from server.api.settings import Settings


def _make_request(headers, path="/movies/trending"):
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "method": "GET",
        "path": path,
        "raw_path": path.encode("ascii"),
        "query_string": b"",
        "headers": headers,
        "client": ("127.0.0.1", 1234),
        "server": ("testserver", 80),
        "scheme": "http",
        "http_version": "1.1",
    }

    async def receive():
        return {"type": "http.request", "body": b""}

    return Request(scope, receive)


def _settings():
    return Settings(
        log_level="INFO",
        cors_origins_raw="*",
        cors_allow_credentials=False,
        gzip_min_size=0,
        api_host="127.0.0.1",
        api_port=8000,
        api_reload=False,
    )


class DummyLogger:
    def __init__(self, captured):
        self.captured = captured

    def info(self, msg, extra=None):
        self.captured["info"] = (msg, extra)

    def error(self, msg, extra=None):
        self.captured["error"] = (msg, extra)

    def exception(self, msg, extra=None):
        self.captured["exc"] = (msg, extra)


def test_request_id_middleware_sets_header(monkeypatch):
    from server.api.middleware import request_id as mod

    captured = {"info": None, "metrics": []}

    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger(captured))
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured["metrics"].append((name, value)))

    middleware = build_request_id_middleware(_settings())

    request = _make_request([(b"x-request-id", b"req-123")])

    async def call_next(req):
        assert req.state.request_id == "req-123"
        return Response(status_code=201)

    response = asyncio.run(middleware(request, call_next))

    assert response.status_code == 201
    assert response.headers["X-Request-ID"] == "req-123"
    assert ("http_requests_total", 1) in captured["metrics"]
    assert ("http_responses_2xx_total", 1) in captured["metrics"]
    assert captured["info"] is not None
    assert captured["info"][1]["status"] == 201


def test_request_id_generated_when_missing(monkeypatch):
    from server.api.middleware import request_id as mod

    captured = {"info": None}
    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger(captured))

    middleware = build_request_id_middleware(_settings())

    async def call_next(req):
        return Response(status_code=200)

    response = asyncio.run(middleware(_make_request([]), call_next))

    rid = response.headers["X-Request-ID"]
    assert isinstance(rid, str) and len(rid) == 32
    assert captured["info"][1]["request_id"] == rid


def test_exception_handler_includes_request_id(monkeypatch):
    from server.api.middleware import errors as mod

    captured = {"exc": None, "metrics": []}

    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger(captured))
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured["metrics"].append((name, value)))

    handler = build_exception_handler(_settings())

    request = _make_request([])
    request.state.request_id = "req-xyz"

    response = asyncio.run(handler(request, RuntimeError("boom")))

    payload = json.loads(response.body.decode("utf-8"))
    assert response.status_code == 500
    assert payload["detail"] == "Internal Server Error"
    assert payload["request_id"] == "req-xyz"
    assert isinstance(payload["error_id"], str) and payload["error_id"]
    assert ("http_errors_5xx_total", 1) in captured["metrics"]
    assert captured["exc"] is not None


def test_fallback_unavailable_handler_returns_503(monkeypatch):
    from server.api.middleware import errors as mod

    captured = {"error": None, "metrics": []}

    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger(captured))
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured["metrics"].append((name, value)))

    handler = build_fallback_unavailable_handler(_settings())

    request = _make_request([])
    request.state.request_id = "req-503"

    exc = FallbackUnavailableError("trending", RuntimeError("table unavailable"))
    response = asyncio.run(handler(request, exc))

    payload = json.loads(response.body.decode("utf-8"))
    assert response.status_code == 503
    assert payload == {"detail": FALLBACK_UNAVAILABLE_MESSAGE, "request_id": "req-503"}
    assert ("http_fallback_unavailable_total", 1) in captured["metrics"]
    assert captured["error"][1]["intent"] == "trending"
