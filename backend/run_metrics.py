from __future__ import annotations

"""
backend/run_metrics.py

Métricas agregadas del proceso (thread-safe) para proveedores, resolución y enrichment.

Uso:
    from backend.run_metrics import METRICS

    METRICS.incr("tmdb.http.requests")
    METRICS.observe_ms("tmdb.http.latency_ms", elapsed_ms)
    METRICS.add_error("tmdb", "search", endpoint="/search/movie", detail="HTTP 503")
    METRICS.incr("resolve.search.primary.error")

    summary = METRICS.snapshot()
"""

import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Final

_PROM_NAME_RE: Final[re.Pattern[str]] = re.compile(r"[^a-zA-Z0-9_]")


@dataclass(frozen=True)
class ErrorEvent:
    ts: float
    subsystem: str   # "streaming" | "tmdb" | "omdb" | "youtube" | "resolve" | "enrich"
    action: str      # "search" | "by_genre" | "images_by_id" | ...
    endpoint: str | None
    detail: str


class RunMetrics:
    """
    - counters: dict[str, int]
    - timings_ms: dict[str, {"count", "sum", "min", "max"}] (+ "avg" en snapshot)
    - errors: lista acotada (drop oldest)
    """

    def __init__(self, *, max_error_events: int = 500) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {}
        self._timings: dict[str, dict[str, float]] = {}
        self._errors: list[ErrorEvent] = []
        self._max_error_events = max(0, int(max_error_events))

    def incr(self, key: str, n: int = 1) -> None:
        if not key:
            return
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + int(n)

    def observe_ms(self, key: str, ms: float) -> None:
        if not key:
            return
        v = float(ms)
        with self._lock:
            t = self._timings.get(key)
            if t is None:
                self._timings[key] = {"count": 1.0, "sum": v, "min": v, "max": v}
                return
            t["count"] += 1.0
            t["sum"] += v
            t["min"] = min(t["min"], v)
            t["max"] = max(t["max"], v)

    def add_error(self, subsystem: str, action: str, *, endpoint: str | None, detail: str) -> None:
        if self._max_error_events <= 0:
            return
        ev = ErrorEvent(
            ts=time.time(),
            subsystem=str(subsystem),
            action=str(action),
            endpoint=endpoint,
            detail=str(detail)[:800],
        )
        with self._lock:
            if len(self._errors) >= self._max_error_events:
                self._errors.pop(0)
            self._errors.append(ev)

    def counter(self, key: str) -> int:
        with self._lock:
            return self._counters.get(key, 0)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._errors.clear()

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            counters = dict(self._counters)
            timings = {k: dict(v) for k, v in self._timings.items()}
            errors = list(self._errors)

        by_subsystem: dict[str, int] = {}
        for e in errors:
            by_subsystem[e.subsystem] = by_subsystem.get(e.subsystem, 0) + 1

        for t in timings.values():
            t["avg"] = t["sum"] / max(1.0, t["count"])

        return {
            "counters": counters,
            "timings_ms": timings,
            "errors": errors,
            "derived": {"errors.total": len(errors), "errors.by_subsystem": by_subsystem},
        }

    def render_prometheus(self, *, prefix: str = "cartelera_") -> str:
        """Counters + timings en formato texto de Prometheus (para GET /metrics)."""
        snap = self.snapshot()
        lines: list[str] = []
        for k, v in sorted(snap["counters"].items()):
            name = prefix + _PROM_NAME_RE.sub("_", k)
            lines.append(f"# TYPE {name} counter")
            lines.append(f"{name} {v}")
        for k, t in sorted(snap["timings_ms"].items()):
            name = prefix + _PROM_NAME_RE.sub("_", k)
            lines.append(f"# TYPE {name} summary")
            lines.append(f"{name}_count {int(t['count'])}")
            lines.append(f"{name}_sum {t['sum']:.3f}")
        return "\n".join(lines) + ("\n" if lines else "")


# Singleton del proceso
METRICS = RunMetrics()
