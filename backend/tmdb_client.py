from __future__ import annotations

"""
backend/tmdb_client.py

Adapter TMDb (film-db primaria). Dos usos:
- Tier secundario de la resolución: search_movies / popular -> MovieResponse.
- Lookups de imágenes del enrichment: images_by_id / images_by_search -> PosterResult.

TMDb ya puntúa en 0..10 (igualmente hacemos clamp).
"""

from collections.abc import Mapping

from backend import logger
from backend.errors import MalformedResponseError
from backend.http_client import JsonObject, JsonTransport
from backend.image_urls import BACKDROP_SIZE, POSTER_SIZE, normalize, tmdb_image_url
from backend.models import (
    EMPTY_POSTER_RESULT,
    GenreId,
    Movie,
    MovieResponse,
    PosterResult,
    rating_0_10,
    safe_float,
    safe_int,
    safe_str,
)


def _genre_ids(raw: object) -> tuple[GenreId, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(g for g in raw if isinstance(g, (int, str)) and not isinstance(g, bool))


def transform_result(item: Mapping[str, object]) -> Movie:
    raw_id = item.get("id")
    movie_id = safe_int(raw_id)
    tmdb_id = str(movie_id) if movie_id is not None else safe_str(raw_id)

    return Movie(
        id=movie_id if movie_id is not None else tmdb_id,
        title=safe_str(item.get("title")),
        overview=safe_str(item.get("overview")),
        poster_path=normalize(safe_str(item.get("poster_path"))) or "",
        backdrop_path=normalize(safe_str(item.get("backdrop_path"))) or "",
        release_date=safe_str(item.get("release_date")),
        vote_average=rating_0_10(item.get("vote_average")),
        vote_count=max(0, safe_int(item.get("vote_count")) or 0),
        popularity=safe_float(item.get("popularity")) or 0.0,
        genre_ids=_genre_ids(item.get("genre_ids")),
        tmdb_id=tmdb_id,
        imdb_id=safe_str(item.get("imdb_id")),
        source="tmdb",
    )


def _images_from(item: Mapping[str, object]) -> PosterResult:
    return PosterResult(
        poster_url=tmdb_image_url(safe_str(item.get("poster_path")) or None, POSTER_SIZE),
        backdrop_url=tmdb_image_url(safe_str(item.get("backdrop_path")) or None, BACKDROP_SIZE),
    )


class TmdbAdapter:
    def __init__(self, transport: JsonTransport) -> None:
        self._http = transport

    # --------------------------------------------------------
    # Listados (tier secundario)
    # --------------------------------------------------------

    def _list_response(self, data: JsonObject, *, page: int) -> MovieResponse:
        raw = data.get("results")
        if not isinstance(raw, list):
            raise MalformedResponseError(self._http.provider, "response has no 'results' array")
        movies = [transform_result(it) for it in raw if isinstance(it, Mapping)]
        return MovieResponse.build(
            page=safe_int(data.get("page")) or page,
            results=movies,
            total_pages=data.get("total_pages"),
            total_results=data.get("total_results"),
        )

    def search_movies(self, query: str, page: int = 1) -> MovieResponse:
        data = self._http.get_json("/search/movie", {"query": query, "page": max(1, int(page))})
        return self._list_response(data, page=page)

    def popular(self, page: int = 1) -> MovieResponse:
        data = self._http.get_json("/movie/popular", {"page": max(1, int(page))})
        return self._list_response(data, page=page)

    # --------------------------------------------------------
    # Imágenes (enrichment)
    # --------------------------------------------------------

    def images_by_id(self, tmdb_id: str | int) -> PosterResult:
        data = self._http.get_json(f"/movie/{tmdb_id}")
        return _images_from(data)

    def images_by_search(self, title: str, year: int | str | None = None) -> PosterResult:
        """Primer resultado de /search/movie con query "<title> <year>"."""
        query = f"{title} {year}" if year else title
        data = self._http.get_json("/search/movie", {"query": query})
        results = data.get("results")
        if not isinstance(results, list) or not results or not isinstance(results[0], Mapping):
            logger.debug_ctx("TMDB", f"images_by_search({query!r}) -> no results")
            return EMPTY_POSTER_RESULT
        return _images_from(results[0])
