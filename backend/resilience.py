from __future__ import annotations

"""
backend/resilience.py

Circuit breaker simple por proveedor ("streaming", "tmdb", "omdb", "youtube").

Los adapters NO reintentan (cada operación = exactamente 1 request). Lo que sí hacemos
es dejar de llamar a un proveedor que está caído o rate-limitando: tras N fallos
"duros" consecutivos el breaker se abre y ProviderHttpClient falla rápido (sin red),
con lo que la resolución pasa directamente al siguiente tier.

Estados:
    - CLOSED (normal)
    - OPEN (bloquea temporalmente)
    - HALF_OPEN (deja pasar 1 probe; si ok => CLOSED; si falla => OPEN)

Thread-safe: el enrichment llama a los proveedores desde un ThreadPool.
No impone logging: devuelve (allowed, reason) para que el caller use backend/logger.py.
"""

import threading
import time
from dataclasses import dataclass
from typing import Literal

BreakerStateName = Literal["CLOSED", "OPEN", "HALF_OPEN"]


@dataclass
class CircuitState:
    failures: int = 0
    opened_at: float = 0.0
    state: BreakerStateName = "CLOSED"
    last_error: str = ""


def is_breaker_failure(status: int | None) -> bool:
    """
    Qué cuenta como fallo "duro" para el breaker:
    - transporte (status None)
    - 429 (rate limit)
    - 5xx
    Un 404/401 es una respuesta válida del proveedor, no una caída.
    """
    if status is None:
        return True
    return status == 429 or status >= 500


class CircuitBreaker:
    def __init__(
        self,
        *,
        failure_threshold: int = 5,
        open_seconds: float = 20.0,
        half_open_max_calls: int = 1,
    ) -> None:
        self._lock = threading.Lock()
        self._states: dict[str, CircuitState] = {}
        self._failure_threshold = max(1, int(failure_threshold))
        self._open_seconds = max(0.1, float(open_seconds))
        self._half_open_max_calls = max(1, int(half_open_max_calls))
        self._half_open_inflight: dict[str, int] = {}

    def allow(self, key: str) -> tuple[bool, str]:
        """Returns: (allowed, reason)."""
        now = time.monotonic()
        with self._lock:
            st = self._states.setdefault(key, CircuitState())

            if st.state == "CLOSED":
                return True, "closed"

            if st.state == "OPEN":
                if (now - st.opened_at) < self._open_seconds:
                    return False, "open"
                st.state = "HALF_OPEN"
                self._half_open_inflight[key] = 0

            inflight = self._half_open_inflight.get(key, 0)
            if inflight >= self._half_open_max_calls:
                return False, "half_open:quota_reached"
            self._half_open_inflight[key] = inflight + 1
            return True, "half_open:probe"

    def on_success(self, key: str) -> None:
        with self._lock:
            self._states[key] = CircuitState()
            self._half_open_inflight.pop(key, None)

    def on_failure(self, key: str, *, error: str) -> None:
        now = time.monotonic()
        with self._lock:
            st = self._states.setdefault(key, CircuitState())
            st.failures += 1
            st.last_error = str(error)[:500]

            # fallo en probe => OPEN directamente
            if st.state == "HALF_OPEN" or st.failures >= self._failure_threshold:
                st.state = "OPEN"
                st.opened_at = now
                self._half_open_inflight.pop(key, None)

    def state_of(self, key: str) -> CircuitState | None:
        with self._lock:
            st = self._states.get(key)
            return None if st is None else CircuitState(**st.__dict__)

    def snapshot(self) -> dict[str, BreakerStateName]:
        with self._lock:
            return {k: st.state for k, st in self._states.items()}
