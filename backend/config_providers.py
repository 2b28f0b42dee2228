from __future__ import annotations

"""
backend/config_providers.py

Configuración de los cuatro proveedores externos + knobs del pipeline.

- Credenciales SOLO desde entorno (.env). Nada embebido en los adapters.
- `build_provider_configs()` construye los ProviderConfig una vez al arrancar;
  catalog.py los inyecta en cada ProviderHttpClient.
"""

from dataclasses import dataclass, field
from typing import Literal

from backend.config_base import (
    _cap_float_min,
    _cap_int,
    _get_env_bool,
    _get_env_float,
    _get_env_int,
    _get_env_str,
)

ProviderName = Literal["streaming", "tmdb", "omdb", "youtube"]

# Dónde va la credencial: header (RapidAPI) o query param (TMDb/OMDb/YouTube)
AuthPlacement = Literal["header", "param"]


@dataclass(frozen=True)
class ProviderConfig:
    """
    Configuración inmutable de un proveedor.

    auth_name:
      - nombre del header / query param que lleva la credencial
    default_params / default_headers:
      - se mezclan en cada request (la request gana en caso de colisión)
    """

    name: ProviderName
    base_url: str
    api_key: str | None
    auth_placement: AuthPlacement
    auth_name: str
    timeout_seconds: float = 10.0
    user_agent: str = "Cartelera/1.0 (local)"
    pool_size: int = 8
    default_params: dict[str, str] = field(default_factory=dict)
    default_headers: dict[str, str] = field(default_factory=dict)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class ProviderConfigs:
    streaming: ProviderConfig
    tmdb: ProviderConfig
    omdb: ProviderConfig
    youtube: ProviderConfig


# ============================================================
# Knobs comunes (HTTP)
# ============================================================

PROVIDER_HTTP_TIMEOUT_SECONDS: float = _cap_float_min(
    "PROVIDER_HTTP_TIMEOUT_SECONDS",
    _get_env_float("PROVIDER_HTTP_TIMEOUT_SECONDS", 10.0),
    min_v=0.5,
)

PROVIDER_HTTP_USER_AGENT: str = (
    _get_env_str("PROVIDER_HTTP_USER_AGENT", "Cartelera/1.0 (local)") or "Cartelera/1.0 (local)"
)

# Circuit breaker por proveedor (fallos de transporte / 5xx / 429)
PROVIDER_CIRCUIT_BREAKER_THRESHOLD: int = _cap_int(
    "PROVIDER_CIRCUIT_BREAKER_THRESHOLD",
    _get_env_int("PROVIDER_CIRCUIT_BREAKER_THRESHOLD", 5),
    min_v=1,
    max_v=50,
)
PROVIDER_CIRCUIT_BREAKER_OPEN_SECONDS: float = _cap_float_min(
    "PROVIDER_CIRCUIT_BREAKER_OPEN_SECONDS",
    _get_env_float("PROVIDER_CIRCUIT_BREAKER_OPEN_SECONDS", 20.0),
    min_v=0.5,
)


# ============================================================
# Pipeline
# ============================================================

ENRICH_ENABLED: bool = _get_env_bool("ENRICH_ENABLED", True)

ENRICH_MAX_WORKERS: int = _cap_int(
    "ENRICH_MAX_WORKERS",
    _get_env_int("ENRICH_MAX_WORKERS", 8),
    min_v=1,
    max_v=64,
)


# ============================================================
# Proveedores
# ============================================================

STREAMING_API_KEY: str | None = _get_env_str("STREAMING_API_KEY", None)
STREAMING_BASE_URL: str = (
    _get_env_str("STREAMING_BASE_URL", "https://streaming-availability.p.rapidapi.com")
    or "https://streaming-availability.p.rapidapi.com"
)
STREAMING_RAPIDAPI_HOST: str = (
    _get_env_str("STREAMING_RAPIDAPI_HOST", "streaming-availability.p.rapidapi.com")
    or "streaming-availability.p.rapidapi.com"
)

TMDB_API_KEY: str | None = _get_env_str("TMDB_API_KEY", None)
TMDB_BASE_URL: str = _get_env_str("TMDB_BASE_URL", "https://api.themoviedb.org/3") or "https://api.themoviedb.org/3"

OMDB_API_KEY: str | None = _get_env_str("OMDB_API_KEY", None)
OMDB_BASE_URL: str = _get_env_str("OMDB_BASE_URL", "https://www.omdbapi.com") or "https://www.omdbapi.com"

YOUTUBE_API_KEY: str | None = _get_env_str("YOUTUBE_API_KEY", None)
YOUTUBE_BASE_URL: str = (
    _get_env_str("YOUTUBE_BASE_URL", "https://www.googleapis.com/youtube/v3")
    or "https://www.googleapis.com/youtube/v3"
)


def build_provider_configs() -> ProviderConfigs:
    """Construye la configuración de los 4 proveedores a partir del entorno ya parseado."""
    timeout = float(PROVIDER_HTTP_TIMEOUT_SECONDS)
    ua = PROVIDER_HTTP_USER_AGENT
    pool = int(ENRICH_MAX_WORKERS)

    return ProviderConfigs(
        streaming=ProviderConfig(
            name="streaming",
            base_url=STREAMING_BASE_URL,
            api_key=STREAMING_API_KEY,
            auth_placement="header",
            auth_name="x-rapidapi-key",
            timeout_seconds=timeout,
            user_agent=ua,
            pool_size=pool,
            default_headers={"x-rapidapi-host": STREAMING_RAPIDAPI_HOST},
        ),
        tmdb=ProviderConfig(
            name="tmdb",
            base_url=TMDB_BASE_URL,
            api_key=TMDB_API_KEY,
            auth_placement="param",
            auth_name="api_key",
            timeout_seconds=timeout,
            user_agent=ua,
            pool_size=pool,
        ),
        omdb=ProviderConfig(
            name="omdb",
            base_url=OMDB_BASE_URL,
            api_key=OMDB_API_KEY,
            auth_placement="param",
            auth_name="apikey",
            timeout_seconds=timeout,
            user_agent=ua,
            pool_size=pool,
        ),
        youtube=ProviderConfig(
            name="youtube",
            base_url=YOUTUBE_BASE_URL,
            api_key=YOUTUBE_API_KEY,
            auth_placement="param",
            auth_name="key",
            timeout_seconds=timeout,
            user_agent=ua,
            pool_size=pool,
            default_params={"part": "snippet", "maxResults": "1", "type": "video"},
        ),
    )
