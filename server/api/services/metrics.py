from __future__ import annotations

"""
Contadores del propio API (requests / 5xx / 503 por fallback).
/metrics los expone junto con METRICS del backend (proveedores, tiers, enrichment).
"""

from threading import RLock

from backend.run_metrics import METRICS

_LOCK = RLock()
_METRICS: dict[str, int] = {
    "http_requests_total": 0,
    "http_errors_5xx_total": 0,
    "http_fallback_unavailable_total": 0,
}


def inc(name: str, value: int = 1) -> None:
    with _LOCK:
        _METRICS[name] = _METRICS.get(name, 0) + value


def value(name: str) -> int:
    with _LOCK:
        return _METRICS.get(name, 0)


def render_prometheus() -> str:
    with _LOCK:
        lines: list[str] = []
        for k, v in sorted(_METRICS.items()):
            lines.append(f"# TYPE {k} counter")
            lines.append(f"{k} {v}")
        api_part = "\n".join(lines) + "\n"
    return api_part + METRICS.render_prometheus()
