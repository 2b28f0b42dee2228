from __future__ import annotations

"""
backend/config.py

Punto único de import para la configuración del proyecto.

- config_base.py: .env, flags globales (DEBUG/SILENT/LOG_LEVEL/HTTP_DEBUG), logger a fichero.
- config_providers.py: credenciales, base URLs y knobs HTTP/pipeline.

backend/logger.py lee este módulo desde sys.modules (sin importarlo) para resolver
nivel, SILENT_MODE y fichero de log.
"""

from backend.config_base import (  # noqa: F401
    DEBUG_MODE,
    HTTP_DEBUG,
    LOG_LEVEL,
    LOGGER_FILE_ENABLED,
    LOGGER_FILE_PATH,
    LOGGER_LOG_LINE_MAX_CHARS,
    SILENT_MODE,
)
from backend.config_providers import (  # noqa: F401
    ENRICH_ENABLED,
    ENRICH_MAX_WORKERS,
    PROVIDER_CIRCUIT_BREAKER_OPEN_SECONDS,
    PROVIDER_CIRCUIT_BREAKER_THRESHOLD,
    PROVIDER_HTTP_TIMEOUT_SECONDS,
    ProviderConfig,
    ProviderConfigs,
    build_provider_configs,
)


def _log_config_summary() -> None:
    """Dump de config solo si DEBUG_MODE y NO SILENT_MODE (sin credenciales)."""
    if not DEBUG_MODE or SILENT_MODE:
        return
    from backend import logger as _logger

    configs = build_provider_configs()
    for cfg in (configs.streaming, configs.tmdb, configs.omdb, configs.youtube):
        _logger.info(
            f"[CONFIG] provider={cfg.name} base_url={cfg.base_url} "
            f"credentials={'yes' if cfg.has_credentials else 'no'} timeout={cfg.timeout_seconds}s"
        )
    _logger.info(f"[CONFIG] enrich_enabled={ENRICH_ENABLED} enrich_workers={ENRICH_MAX_WORKERS}")


_log_config_summary()
