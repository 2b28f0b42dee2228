from __future__ import annotations

"""
backend/streaming_client.py

Adapter del catálogo de streaming (RapidAPI "streaming availability").
Es el tier primario de todas las intenciones.

- Una operación = una llamada (sin retries).
- El mapping payload -> Movie vive aquí; el resto del sistema solo ve Movie.
- Falta el array `result` => MalformedResponseError.
"""

from collections.abc import Mapping
from datetime import date
from typing import Final

from backend import logger
from backend.errors import MalformedResponseError
from backend.http_client import JsonObject, JsonTransport
from backend.image_urls import normalize
from backend.mock_catalog import region_label
from backend.models import (
    PAGE_SIZE,
    GenreId,
    Movie,
    MovieResponse,
    rating_0_10,
    release_date_from_year,
    safe_float,
    safe_int,
    safe_str,
)

_BASE_PARAMS: Final[dict[str, str]] = {
    "series_granularity": "show",
    "show_type": "movie",
    "output_language": "en",
}

# El catálogo devuelve tmdbRating en escala 0..100
_RATING_DIVISOR: Final[float] = 10.0


# ============================================================
# Transform
# ============================================================


def _first_url(urls: object, *keys: str) -> str:
    if not isinstance(urls, Mapping):
        return ""
    for k in keys:
        v = urls.get(k)
        if isinstance(v, str) and v.strip():
            return v.strip()
    return ""


def _genre_ids(raw: object) -> tuple[GenreId, ...]:
    """genres: [{"id": ..., "name": ...}] o ids sueltos."""
    if not isinstance(raw, list):
        return ()
    out: list[GenreId] = []
    for g in raw:
        gid = g.get("id") if isinstance(g, Mapping) else g
        if isinstance(gid, (int, str)) and not isinstance(gid, bool) and gid not in out:
            out.append(gid)
    return tuple(out)


def transform_item(item: Mapping[str, object], *, default_overview: str = "") -> Movie:
    tmdb_id = safe_str(item.get("tmdbID"))
    imdb_id = safe_str(item.get("imdbID"))

    return Movie(
        id=tmdb_id or imdb_id,
        title=safe_str(item.get("title")),
        overview=safe_str(item.get("overview")) or default_overview,
        poster_path=normalize(_first_url(item.get("posterURLs"), "original", "500")) or "",
        backdrop_path=normalize(_first_url(item.get("backdropURLs"), "original", "1280")) or "",
        release_date=release_date_from_year(item.get("year")),
        vote_average=rating_0_10(item.get("tmdbRating"), divisor=_RATING_DIVISOR),
        vote_count=max(0, safe_int(item.get("tmdbVotes")) or 0),
        popularity=safe_float(item.get("popularity")) or 0.0,
        genre_ids=_genre_ids(item.get("genres")),
        tmdb_id=tmdb_id,
        imdb_id=imdb_id,
        source="streaming",
    )


def _result_items(data: JsonObject, provider: str) -> list[Mapping[str, object]]:
    raw = data.get("result")
    if not isinstance(raw, list):
        raise MalformedResponseError(provider, "response has no 'result' array")
    return [it for it in raw if isinstance(it, Mapping)]


# ============================================================
# Adapter
# ============================================================


class StreamingCatalogAdapter:
    def __init__(self, transport: JsonTransport) -> None:
        self._http = transport

    def _params(self, page: int, **extra: object) -> dict[str, object]:
        params: dict[str, object] = dict(_BASE_PARAMS)
        params.update(extra)
        params["page"] = max(1, int(page))
        params["limit"] = PAGE_SIZE
        return params

    def _to_response(self, data: JsonObject, movies: list[Movie], *, page: int) -> MovieResponse:
        return MovieResponse.build(
            page=page,
            results=movies,
            total_pages=data.get("total_pages"),
            total_results=data.get("total_results"),
        )

    def search_by_title(self, title: str, page: int = 1) -> MovieResponse:
        """Título vacío = listado general (trending)."""
        data = self._http.get_json("/shows/search/title", self._params(page, title=title or ""))
        movies = [transform_item(it) for it in _result_items(data, self._http.provider)]
        logger.debug_ctx("STREAMING", f"search_by_title({title!r}, page={page}) -> {len(movies)} movies")
        return self._to_response(data, movies, page=page)

    def by_genre(self, genre_id: GenreId, page: int = 1) -> MovieResponse:
        data = self._http.get_json("/shows/search/basic", self._params(page, genres=genre_id))
        movies = [transform_item(it) for it in _result_items(data, self._http.provider)]
        logger.debug_ctx("STREAMING", f"by_genre({genre_id!r}, page={page}) -> {len(movies)} movies")
        return self._to_response(data, movies, page=page)

    def by_region(self, region_code: str, page: int = 1, *, today: date | None = None) -> MovieResponse:
        """
        Películas de la región ordenadas por año, filtradas a las del año en curso.
        Los items sin año se descartan.
        """
        code = (region_code or "").strip().lower()
        current_year = (today or date.today()).year
        _, label = region_label(code)
        placeholder = f"No overview available for this {label} movie."

        data = self._http.get_json(
            "/shows/search/basic",
            self._params(page, country=code, sort_by="year"),
        )
        items = _result_items(data, self._http.provider)

        movies = [
            transform_item(it, default_overview=placeholder)
            for it in items
            if safe_int(it.get("year")) == current_year
        ]
        logger.debug_ctx(
            "STREAMING",
            f"by_region({code!r}, page={page}) -> {len(movies)}/{len(items)} movies from {current_year}",
        )
        return self._to_response(data, movies, page=page)
