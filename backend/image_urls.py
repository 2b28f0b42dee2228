from __future__ import annotations

"""
backend/image_urls.py

Normalización de rutas de imagen heterogéneas a URLs absolutas.

- TMDb devuelve paths relativos a raíz ("/abc.jpg").
- Algunos payloads traen solo el nombre de fichero ("abc.jpg").
- El catálogo de streaming y OMDb devuelven URLs absolutas.

Funciones puras: sin red, sin logging, sin fallos.
"""

from typing import Final

TMDB_IMAGE_BASE_URL: Final[str] = "https://image.tmdb.org/t/p"
YOUTUBE_THUMBNAIL_TEMPLATE: Final[str] = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

POSTER_SIZE: Final[str] = "w500"
BACKDROP_SIZE: Final[str] = "original"


def normalize(path: str | None) -> str | None:
    """
    - None / "" -> None
    - "http..." -> tal cual
    - "/x.jpg" -> CDN a resolución original
    - "x.jpg" -> CDN a w500 (con "/" separador)
    """
    if not path:
        return None
    if path.startswith("http"):
        return path
    if path.startswith("/"):
        return f"{TMDB_IMAGE_BASE_URL}/{BACKDROP_SIZE}{path}"
    return f"{TMDB_IMAGE_BASE_URL}/{POSTER_SIZE}/{path}"


def tmdb_image_url(path: str | None, size: str = POSTER_SIZE) -> str | None:
    """URL del CDN de TMDb a un tamaño concreto (lookups del enrichment)."""
    if not path:
        return None
    if path.startswith("http"):
        return path
    sep = "" if path.startswith("/") else "/"
    return f"{TMDB_IMAGE_BASE_URL}/{size}{sep}{path}"


def youtube_thumbnail_url(video_id: str | None) -> str | None:
    vid = (video_id or "").strip()
    if not vid:
        return None
    return YOUTUBE_THUMBNAIL_TEMPLATE.format(video_id=vid)
