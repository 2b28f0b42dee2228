from __future__ import annotations

"""
backend/logger.py

Logger central del proyecto (fachada sobre `logging`).

API estable
-----------
- debug / info / warning / error
- progress (siempre visible, sin timestamps)
- debug_ctx(tag, msg) (debug contextual alineado con SILENT/DEBUG)
- truncate_line(text) (para no volcar payloads enormes de los proveedores)

Política
--------
- SILENT_MODE=True: suprime debug/info/warning (salvo always=True). `error()` siempre emite.
- DEBUG_MODE=True: permite trazas por proveedor/tier; en SILENT+DEBUG se emiten por `progress`.
- El logging nunca debe romper la resolución de una petición.

Salida opcional a fichero
-------------------------
Consume (sin importarlo directamente) `backend.config`:

- LOGGER_FILE_ENABLED: bool
- LOGGER_FILE_PATH: Path | str | None

Prioridad del path: ENV LOGGER_FILE_PATH > backend.config.LOGGER_FILE_PATH > None.

Notas técnicas
--------------
- No importamos `backend.config` (evitamos circular imports): se lee desde `sys.modules`.
- Inicialización idempotente.
"""

import logging
import os
import sys
import threading
from types import ModuleType
from typing import Final, Mapping, TypedDict

from typing_extensions import Unpack


class LogKwargs(TypedDict, total=False):
    """Subconjunto de kwargs de logging.Logger.* que reenviamos."""

    exc_info: bool | BaseException | None
    stack_info: bool
    stacklevel: int
    extra: Mapping[str, object] | None


# ============================================================================
# CONFIGURACIÓN GLOBAL
# ============================================================================

LOGGER_NAME: Final[str] = "cartelera"

_LOGGER: logging.Logger | None = None
_CONFIGURED: bool = False

_FILE_HANDLER_TAG: Final[str] = "_cartelera_file_handler"
_PROGRESS_FILE_LOCK = threading.Lock()

_DEFAULT_LOG_LINE_MAX_CHARS: Final[int] = 500

# Loggers de terceros que bajamos a WARNING salvo HTTP_DEBUG=True
_NOISY_LOGGERS: Final[tuple[str, ...]] = (
    "urllib3",
    "urllib3.connectionpool",
    "requests",
    "httpx",
)


def _safe_get_cfg() -> ModuleType | None:
    """Devuelve backend.config si ya está importado."""
    mod = sys.modules.get("backend.config")
    return mod if isinstance(mod, ModuleType) else None


def _cfg_value(name: str, default: object) -> object:
    cfg = _safe_get_cfg()
    if cfg is None:
        return default
    return getattr(cfg, name, default)


def _cfg_bool(name: str, default: bool = False) -> bool:
    try:
        return bool(_cfg_value(name, default))
    except Exception:
        return default


def _cfg_int(name: str, default: int) -> int:
    try:
        return int(_cfg_value(name, default))  # type: ignore[arg-type]
    except Exception:
        return default


def is_silent_mode() -> bool:
    return _cfg_bool("SILENT_MODE", False)


def is_debug_mode() -> bool:
    return _cfg_bool("DEBUG_MODE", False)


# ============================================================================
# NIVEL + LOGGERS EXTERNOS
# ============================================================================

_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _resolve_level_from_config() -> int:
    """
    Prioridad:
      1) LOG_LEVEL explícito
      2) DEBUG_MODE
      3) INFO
    """
    raw = _cfg_value("LOG_LEVEL", None)
    if isinstance(raw, str) and raw.strip():
        mapped = _LEVELS.get(raw.strip().upper())
        if mapped is not None:
            return mapped

    if is_debug_mode():
        return logging.DEBUG
    return logging.INFO


def _configure_external_loggers() -> None:
    if _cfg_bool("HTTP_DEBUG", False):
        return
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# ============================================================================
# FILE LOGGING (opcional)
# ============================================================================


def _file_logging_path() -> str | None:
    if not _cfg_bool("LOGGER_FILE_ENABLED", False):
        return None

    env_p = (os.getenv("LOGGER_FILE_PATH") or "").strip()
    if env_p:
        return env_p

    p = _cfg_value("LOGGER_FILE_PATH", None)
    if p is None:
        return None
    s = str(p).strip()
    return s or None


def _has_our_file_handler(root: logging.Logger) -> bool:
    return any(getattr(h, _FILE_HANDLER_TAG, False) for h in root.handlers)


def _ensure_file_handler(root: logging.Logger, *, level: int) -> None:
    """Best-effort: si no se puede abrir el fichero seguimos solo con consola."""
    path = _file_logging_path()
    if not path or _has_our_file_handler(root):
        return

    try:
        dir_name = os.path.dirname(path)
        if dir_name:
            os.makedirs(dir_name, exist_ok=True)

        fh = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        setattr(fh, _FILE_HANDLER_TAG, True)
        root.addHandler(fh)
    except OSError:
        return


def _append_progress_to_file(message: str) -> None:
    path = _file_logging_path()
    if not path:
        return
    try:
        with _PROGRESS_FILE_LOCK:
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{message}\n")
    except OSError:
        return


# ============================================================================
# INICIALIZACIÓN
# ============================================================================


def _ensure_configured() -> logging.Logger:
    global _LOGGER, _CONFIGURED

    level = _resolve_level_from_config()
    root = logging.getLogger()

    if not _CONFIGURED or _LOGGER is None:
        if not root.handlers:
            logging.basicConfig(
                level=level,
                format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            )
        _LOGGER = logging.getLogger(LOGGER_NAME)
        _CONFIGURED = True

    _LOGGER.setLevel(level)
    _configure_external_loggers()
    _ensure_file_handler(root, level=level)
    return _LOGGER


def _should_log(*, always: bool = False) -> bool:
    return always or not is_silent_mode()


# ============================================================================
# PROGRESO (NO logging)
# ============================================================================


def progress(message: str) -> None:
    """Línea siempre visible (ignora SILENT_MODE)."""
    try:
        sys.stdout.write(f"{message}\n")
        sys.stdout.flush()
    except Exception:
        pass
    _append_progress_to_file(message)


# ============================================================================
# API PÚBLICA
# ============================================================================


def debug(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if _should_log(always=always):
        _ensure_configured().debug(msg, *args, **kwargs)


def info(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if _should_log(always=always):
        _ensure_configured().info(msg, *args, **kwargs)


def warning(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if _should_log(always=always):
        _ensure_configured().warning(msg, *args, **kwargs)


def error(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    """ERROR siempre se emite (ignora SILENT_MODE)."""
    _ensure_configured().error(msg, *args, **kwargs)


def truncate_line(text: str, max_chars: int | None = None) -> str:
    """
    Trunca una línea (p.ej. el body de un 4xx de RapidAPI).

    - max_chars explícito tiene prioridad.
    - Si no, LOGGER_LOG_LINE_MAX_CHARS desde config.
    """
    limit = (
        int(max_chars)
        if isinstance(max_chars, int) and max_chars > 0
        else _cfg_int("LOGGER_LOG_LINE_MAX_CHARS", _DEFAULT_LOG_LINE_MAX_CHARS)
    )
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 12)] + " …(truncated)"


def debug_ctx(tag: str, msg: object) -> None:
    """
    Debug contextual con tag ("STREAMING", "TMDB", "RESOLVE", "ENRICH"...).

    - DEBUG_MODE=False -> no-op
    - SILENT_MODE=True  -> progress("[TAG][DEBUG] ...")
    - SILENT_MODE=False -> info("[TAG][DEBUG] ...")
    """
    if not is_debug_mode():
        return

    t = (tag or "DEBUG").strip().upper()
    text = f"[{t}][DEBUG] {msg}"
    if is_silent_mode():
        progress(text)
    else:
        info(text)
