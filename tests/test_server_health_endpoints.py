import pytest

pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from backend.run_metrics import METRICS
from server.api.app import create_app


def test_health_and_metrics():
    METRICS.incr("resolve.trending.mock")

    client = TestClient(create_app())

    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["ok"] is True
    assert res.headers.get("x-request-id")

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "text/plain" in metrics.headers.get("content-type", "")
    assert "http_requests_total" in metrics.text
    assert "cartelera_resolve_trending_mock 1" in metrics.text
