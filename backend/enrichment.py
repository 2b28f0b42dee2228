from __future__ import annotations

"""
backend/enrichment.py

Mejora de imágenes de una lista de películas ya resuelta (solo respuestas "live";
el mock nunca pasa por aquí).

Por película:
  1) tmdb_id conocido -> TMDb /movie/{id}
  2) sin póster aún   -> TMDb /search/movie "<title> <year>"
  3) falta póster o backdrop -> OMDb (imdb_id o título+año), solo póster
  4) en paralelo con 1-3: miniatura del tráiler en YouTube
  5) merge:
       poster   = encontrado o el original
       backdrop = encontrado o miniatura o el original
       trailer_thumbnail = miniatura o ""

Garantías:
- Misma longitud y orden que la entrada.
- Un paso que falla no aporta nada (el resto sigue).
- Un fallo inesperado de la película entera => se devuelve la película original.
- Si no se encontró nada => se devuelve EXACTAMENTE el mismo objeto Movie.
- Una película nunca cancela ni corrompe a otra.
"""

from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from typing import TypeVar

from backend import logger
from backend.models import EMPTY_POSTER_RESULT, Movie, PosterResult
from backend.omdb_client import OmdbAdapter
from backend.run_metrics import METRICS, RunMetrics
from backend.tmdb_client import TmdbAdapter
from backend.youtube_client import YoutubeAdapter

T = TypeVar("T")


def _attempt(step: str, title: str, fn: Callable[[], T], default: T) -> T:
    try:
        return fn()
    except Exception as exc:
        logger.debug_ctx("ENRICH", f"{step} failed for {title!r}: {exc!r}")
        return default


def _merge(found: PosterResult, update: PosterResult) -> PosterResult:
    return PosterResult(
        poster_url=found.poster_url or update.poster_url,
        backdrop_url=found.backdrop_url or update.backdrop_url,
        thumbnail_url=found.thumbnail_url or update.thumbnail_url,
    )


class ImageEnricher:
    def __init__(
        self,
        tmdb: TmdbAdapter,
        omdb: OmdbAdapter,
        youtube: YoutubeAdapter,
        *,
        max_workers: int = 8,
        metrics: RunMetrics | None = None,
    ) -> None:
        self._tmdb = tmdb
        self._omdb = omdb
        self._youtube = youtube
        self._max_workers = max(1, int(max_workers))
        self._metrics = metrics or METRICS

    # --------------------------------------------------------
    # Lookups de un título
    # --------------------------------------------------------

    def _poster_chain(
        self,
        title: str,
        year: int | str | None,
        imdb_id: str | None,
        tmdb_id: str | int | None,
    ) -> PosterResult:
        found = EMPTY_POSTER_RESULT

        if tmdb_id:
            found = _attempt("tmdb.images_by_id", title, lambda: self._tmdb.images_by_id(tmdb_id), found)

        if not found.poster_url and title:
            by_search = _attempt(
                "tmdb.images_by_search",
                title,
                lambda: self._tmdb.images_by_search(title, year),
                EMPTY_POSTER_RESULT,
            )
            found = _merge(found, by_search)

        if (not found.poster_url or not found.backdrop_url) and (imdb_id or title):
            omdb = _attempt(
                "omdb.poster",
                title,
                lambda: self._omdb.poster(imdb_id=imdb_id or None, title=title, year=year),
                EMPTY_POSTER_RESULT,
            )
            if not found.poster_url and omdb.poster_url:
                found = replace(found, poster_url=omdb.poster_url)

        return found

    def _thumbnail(self, title: str, year: int | str | None) -> str | None:
        if not title:
            return None
        return _attempt(
            "youtube.trailer_thumbnail",
            title,
            lambda: self._youtube.trailer_thumbnail(title, year),
            None,
        )

    def get_poster_images(
        self,
        title: str,
        year: int | str | None = None,
        imdb_id: str | None = None,
        tmdb_id: str | int | None = None,
        *,
        thumbnail_pool: Executor | None = None,
    ) -> PosterResult:
        """
        Póster / backdrop / miniatura de tráiler para un título.
        Con `thumbnail_pool`, la búsqueda en YouTube corre en paralelo con la cadena de pósters.
        """
        thumb_future: Future[str | None] | None = None
        if thumbnail_pool is not None:
            thumb_future = thumbnail_pool.submit(self._thumbnail, title, year)

        found = self._poster_chain(title, year, imdb_id, tmdb_id)
        thumbnail = thumb_future.result() if thumb_future is not None else self._thumbnail(title, year)

        return replace(found, thumbnail_url=thumbnail)

    # --------------------------------------------------------
    # Bulk
    # --------------------------------------------------------

    def _enrich_one(self, movie: Movie, thumbnail_pool: Executor) -> Movie:
        try:
            images = self.get_poster_images(
                movie.title,
                movie.year,
                movie.imdb_id or None,
                movie.tmdb_id or None,
                thumbnail_pool=thumbnail_pool,
            )
        except Exception as exc:
            self._metrics.incr("enrich.failed")
            logger.debug_ctx("ENRICH", f"giving up on {movie.title!r}: {exc!r}")
            return movie

        if images.is_empty:
            return movie

        self._metrics.incr("enrich.improved")
        return replace(
            movie,
            poster_path=images.poster_url or movie.poster_path,
            backdrop_path=images.backdrop_url or images.thumbnail_url or movie.backdrop_path,
            trailer_thumbnail=images.thumbnail_url or "",
        )

    def enrich(self, movies: Sequence[Movie]) -> list[Movie]:
        if not movies:
            return list(movies)

        self._metrics.incr("enrich.movies", len(movies))
        workers = min(self._max_workers, len(movies))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="enrich-thumb") as thumb_pool:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="enrich") as pool:
                futures = [pool.submit(self._enrich_one, m, thumb_pool) for m in movies]

                out: list[Movie] = []
                for movie, fut in zip(movies, futures):
                    try:
                        out.append(fut.result())
                    except Exception as exc:
                        self._metrics.incr("enrich.failed")
                        logger.debug_ctx("ENRICH", f"worker failed for {movie.title!r}: {exc!r}")
                        out.append(movie)

        logger.debug_ctx("ENRICH", f"enriched {len(out)} movies with {workers} workers")
        return out
