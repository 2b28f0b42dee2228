# logger y utilidades de logging
from __future__ import annotations

import logging
from pathlib import Path

from backend.config import LOGGER_FILE_PATH
from server.api.settings import Settings

API_LOGGER_NAME = "cartelera.api"

_FILE_HANDLER_TAG = "_cartelera_api_file_handler"


def _has_our_file_handler(root: logging.Logger) -> bool:
    return any(getattr(h, _FILE_HANDLER_TAG, False) for h in root.handlers)


def _ensure_file_handler(root: logging.Logger, *, path: Path | None, level: str) -> None:
    """
    Mismo fichero que el backend (LOGGER_FILE_PATH ya congelado por backend.config_base).
    Un fallo al abrir el fichero no debe impedir arrancar el API.
    """
    if path is None:
        return

    if _has_our_file_handler(root):
        for handler in root.handlers:
            if getattr(handler, _FILE_HANDLER_TAG, False):
                handler.setLevel(level)
        return

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    except OSError:
        return

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    setattr(handler, _FILE_HANDLER_TAG, True)
    root.addHandler(handler)


def configure_logging(settings: Settings, *, file_path: Path | None = LOGGER_FILE_PATH) -> logging.Logger:
    """
    Configuración mínima:
    - Respetamos handlers/format de quien ejecute (uvicorn, gunicorn, etc.).
    - Ajustamos nivel global según env.
    """
    root = logging.getLogger()
    root.setLevel(settings.log_level)
    _ensure_file_handler(root, path=file_path, level=settings.log_level)

    logger = logging.getLogger(API_LOGGER_NAME)
    logger.setLevel(settings.log_level)
    return logger
