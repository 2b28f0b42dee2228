"""
backend/config_base.py

Base de configuración de Cartelera: lee `.env` al importar y expone los parsers de env
que usan config_providers.py y server/api. No importa ningún otro config_*.py.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Final, TypeVar

from dotenv import load_dotenv

# Las variables ya exportadas en el entorno ganan al .env
load_dotenv(override=False)

from backend import logger as _logger  # noqa: E402

_N = TypeVar("_N", int, float)

PROJECT_DIR: Final[Path] = Path(__file__).resolve().parent.parent


# ============================================================
# Parsers de env
# ============================================================

_BOOL_WORDS: Final[dict[str, bool]] = {
    **dict.fromkeys(("1", "true", "t", "yes", "y", "on"), True),
    **dict.fromkeys(("0", "false", "f", "no", "n", "off"), False),
}


def _clean_env_raw(v: object | None) -> str | None:
    """Vacío -> None; quita comillas envolventes ('x' / "x")."""
    text = "" if v is None else str(v).strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        text = text[1:-1].strip()
    return text or None


def _get_env_str(name: str, default: str | None = None) -> str | None:
    raw = _clean_env_raw(os.getenv(name))
    return default if raw is None else raw


def _get_env_number(name: str, default: _N, cast: Callable[[str], _N]) -> _N:
    raw = _clean_env_raw(os.getenv(name))
    if raw is None:
        return default
    kind = "int" if cast is int else "float"
    try:
        return cast(raw)
    except ValueError:
        _logger.warning(f"Ignoring {name}={raw!r} (not a {kind}); using {default}", always=True)
        return default


def _get_env_int(name: str, default: int) -> int:
    return _get_env_number(name, default, int)


def _get_env_float(name: str, default: float) -> float:
    return _get_env_number(name, default, float)


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _clean_env_raw(os.getenv(name))
    if raw is None:
        return default
    parsed = _BOOL_WORDS.get(raw.lower())
    if parsed is None:
        _logger.warning(f"Ignoring {name}={raw!r} (not a bool); using {default}", always=True)
        return default
    return parsed


def _cap_int(name: str, value: int, *, min_v: int, max_v: int) -> int:
    capped = min(max(value, min_v), max_v)
    if capped != value:
        _logger.warning(f"{name}={value} out of [{min_v}, {max_v}]; using {capped}", always=True)
    return capped


def _cap_float_min(name: str, value: float, *, min_v: float) -> float:
    if value >= min_v:
        return value
    _logger.warning(f"{name}={value} below {min_v}; using {min_v}", always=True)
    return min_v


# ============================================================
# Modo de ejecución
# ============================================================

DEBUG_MODE: bool = _get_env_bool("DEBUG_MODE", False)
SILENT_MODE: bool = _get_env_bool("SILENT_MODE", False)
HTTP_DEBUG: bool = _get_env_bool("HTTP_DEBUG", False)
LOG_LEVEL: str | None = _get_env_str("LOG_LEVEL")


# ============================================================
# Log a fichero (opcional)
# ============================================================

LOGGER_FILE_ENABLED: bool = _get_env_bool("LOGGER_FILE_ENABLED", False)
LOGGER_FILE_PREFIX: Final[str] = _get_env_str("LOGGER_FILE_PREFIX", "cartelera") or "cartelera"
LOGGER_LOG_LINE_MAX_CHARS: int = _cap_int(
    "LOGGER_LOG_LINE_MAX_CHARS",
    _get_env_int("LOGGER_LOG_LINE_MAX_CHARS", 500),
    min_v=40,
    max_v=20_000,
)


def _under_project(raw: str) -> Path:
    p = Path(raw)
    return p if p.is_absolute() else PROJECT_DIR / p


LOGGER_FILE_DIR: Final[Path] = _under_project(_get_env_str("LOGGER_FILE_DIR", "logs") or "logs")


def _sanitize_filename_component(s: str) -> str:
    cleaned = "".join(ch if ch.isalnum() or ch in "-_.@" else "_" for ch in (s or ""))
    return cleaned.strip("._-") or "run"


def _build_logger_file_path() -> Path | None:
    """
    Un único fichero por arranque: se fija en os.environ["LOGGER_FILE_PATH"] para que
    los workers de uvicorn escriban en el mismo.
    """
    if not LOGGER_FILE_ENABLED:
        return None

    explicit = _clean_env_raw(os.getenv("LOGGER_FILE_PATH"))
    if explicit:
        return _under_project(explicit).resolve()

    stamp = _sanitize_filename_component(datetime.now().strftime("%Y%m%d-%H%M%S"))
    name = f"{_sanitize_filename_component(LOGGER_FILE_PREFIX)}_{stamp}_{os.getpid()}.log"
    path = (LOGGER_FILE_DIR / name).resolve()
    os.environ["LOGGER_FILE_PATH"] = str(path)
    return path


LOGGER_FILE_PATH: Path | None = _build_logger_file_path()
