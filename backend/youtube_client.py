from __future__ import annotations

"""
backend/youtube_client.py

Adapter YouTube Data v3: miniatura del tráiler oficial de una película.
"""

from collections.abc import Mapping

from backend import logger
from backend.http_client import JsonTransport
from backend.image_urls import youtube_thumbnail_url


def trailer_query(title: str, year: int | str | None = None) -> str:
    """Partes vacías fuera: nunca dobles espacios si no hay año."""
    parts = [str(p).strip() for p in (title, year, "official trailer") if p]
    return " ".join(p for p in parts if p)


class YoutubeAdapter:
    def __init__(self, transport: JsonTransport) -> None:
        self._http = transport

    def trailer_thumbnail(self, title: str, year: int | str | None = None) -> str | None:
        query = trailer_query(title, year)
        data = self._http.get_json("/search", {"q": query})

        items = data.get("items")
        if not isinstance(items, list) or not items or not isinstance(items[0], Mapping):
            logger.debug_ctx("YOUTUBE", f"no video for {query!r}")
            return None

        id_obj = items[0].get("id")
        video_id = id_obj.get("videoId") if isinstance(id_obj, Mapping) else None
        return youtube_thumbnail_url(video_id if isinstance(video_id, str) else None)
