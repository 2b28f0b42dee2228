from __future__ import annotations

"""
backend/http_client.py

Transporte HTTP por proveedor: un ProviderHttpClient por ProviderConfig, construido una
vez (catalog.py) e inyectado en el adapter correspondiente.

🧠 Principios
-------------
1) Una operación = una request:
   - Sin retries en urllib3 (max_retries=0). Los reintentos "lógicos" son el siguiente
     tier de la resolución, no otra llamada al mismo proveedor.

2) Fallo explícito:
   - RequestException / status >= 400 / circuit breaker abierto / sin credenciales
     -> ProviderError.
   - 2xx con body no-JSON o no-objeto -> MalformedResponseError.

3) Credenciales fuera de los adapters:
   - Se inyectan aquí (header o query param) según ProviderConfig.

4) ThreadPool safe:
   - requests.Session compartida (lazy-init con lock) con pool ajustado a la
     concurrencia del enrichment.
   - Métricas + circuit breaker thread-safe.
"""

import threading
import time
from collections.abc import Mapping
from typing import Protocol

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException

from backend import logger
from backend.config_providers import ProviderConfig
from backend.errors import MalformedResponseError, ProviderError
from backend.resilience import CircuitBreaker, is_breaker_failure
from backend.run_metrics import METRICS, RunMetrics

JsonObject = dict[str, object]


class JsonTransport(Protocol):
    """Lo único que los adapters necesitan del transporte (permite dobles en tests)."""

    provider: str

    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> JsonObject: ...


def _clean_params(params: Mapping[str, object]) -> dict[str, str]:
    """requests serializa None como ausente; aquí además pasamos todo a str."""
    out: dict[str, str] = {}
    for k, v in params.items():
        if v is None:
            continue
        out[str(k)] = str(v)
    return out


class ProviderHttpClient:
    def __init__(
        self,
        config: ProviderConfig,
        *,
        breaker: CircuitBreaker | None = None,
        session: requests.Session | None = None,
        metrics: RunMetrics | None = None,
    ) -> None:
        self.config = config
        self.provider = config.name
        self._breaker = breaker
        self._session = session
        self._session_lock = threading.Lock()
        self._metrics = metrics or METRICS

    # --------------------------------------------------------
    # Session
    # --------------------------------------------------------

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session

        with self._session_lock:
            if self._session is not None:
                return self._session

            pool_size = max(1, min(64, int(self.config.pool_size)))
            session = requests.Session()
            adapter = HTTPAdapter(
                max_retries=0,
                pool_connections=pool_size,
                pool_maxsize=pool_size,
            )
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            session.headers.update(
                {
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/json",
                }
            )
            self._session = session
            return session

    def _url(self, path: str) -> str:
        base = self.config.base_url.rstrip("/")
        if not path or path == "/":
            return f"{base}/"
        return f"{base}/{path.lstrip('/')}"

    def _fail(self, action: str, exc: ProviderError) -> ProviderError:
        self._metrics.incr(f"{self.provider}.http.errors")
        self._metrics.add_error(self.provider, action, endpoint=action, detail=str(exc))
        if self._breaker is not None:
            if is_breaker_failure(exc.status) and not isinstance(exc, MalformedResponseError):
                self._breaker.on_failure(self.provider, error=str(exc))
            else:
                # 4xx / body inutilizable: el proveedor responde (cierra HALF_OPEN)
                self._breaker.on_success(self.provider)
        return exc

    # --------------------------------------------------------
    # API
    # --------------------------------------------------------

    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> JsonObject:
        """
        GET <base_url>/<path> y devuelve el objeto JSON.

        Raises:
            ProviderError: transporte / status >= 400 / breaker abierto / sin credenciales
            MalformedResponseError: 2xx con body inutilizable
        """
        cfg = self.config
        if not cfg.has_credentials:
            raise ProviderError(self.provider, "missing credentials")

        if self._breaker is not None:
            allowed, reason = self._breaker.allow(self.provider)
            if not allowed:
                self._metrics.incr(f"{self.provider}.http.short_circuited")
                logger.debug_ctx(self.provider, f"circuit {reason}; skipping {path}")
                raise ProviderError(self.provider, f"circuit {reason}")

        query: dict[str, object] = dict(cfg.default_params)
        query.update(params or {})
        headers = dict(cfg.default_headers)
        if cfg.auth_placement == "header":
            headers[cfg.auth_name] = str(cfg.api_key)
        else:
            query[cfg.auth_name] = cfg.api_key

        url = self._url(path)
        self._metrics.incr(f"{self.provider}.http.requests")
        logger.debug_ctx(self.provider, f"GET {url} params={ {k: v for k, v in query.items() if k != cfg.auth_name} }")

        t0 = time.monotonic()
        try:
            resp = self._get_session().get(
                url,
                params=_clean_params(query),
                headers=headers,
                timeout=cfg.timeout_seconds,
            )
        except RequestException as exc:
            raise self._fail(path, ProviderError(self.provider, f"transport error: {exc!r}")) from exc
        finally:
            self._metrics.observe_ms(f"{self.provider}.http.latency_ms", (time.monotonic() - t0) * 1000.0)

        if resp.status_code >= 400:
            body = logger.truncate_line((resp.text or "").strip())
            raise self._fail(path, ProviderError(self.provider, f"GET {path} failed: {body}", status=resp.status_code))

        try:
            data = resp.json()
        except ValueError as exc:
            raise self._fail(path, MalformedResponseError(self.provider, f"GET {path}: body is not JSON")) from exc

        if not isinstance(data, dict):
            raise self._fail(
                path,
                MalformedResponseError(self.provider, f"GET {path}: expected JSON object, got {type(data).__name__}"),
            )

        if self._breaker is not None:
            self._breaker.on_success(self.provider)
        return data
