from __future__ import annotations

"""
backend/catalog.py

Fachada pública del core: lo único que necesitan el servidor y cualquier otro caller.

- Resuelve cada intención con ResolutionPipeline.
- Si la respuesta viene de un proveedor real, la pasa por el enrichment de imágenes.
- Las respuestas mock se devuelven tal cual.

`build_catalog_service()` cablea adapters + transportes + breaker a partir de la
configuración una sola vez (el servidor lo cachea como dependencia).
"""

from collections.abc import Sequence
from datetime import date

from backend import logger
from backend.config import (
    ENRICH_ENABLED,
    ENRICH_MAX_WORKERS,
    PROVIDER_CIRCUIT_BREAKER_OPEN_SECONDS,
    PROVIDER_CIRCUIT_BREAKER_THRESHOLD,
    ProviderConfigs,
    build_provider_configs,
)
from backend.enrichment import ImageEnricher
from backend.http_client import ProviderHttpClient
from backend.models import GenreId, Movie, MovieResponse, PosterResult
from backend.omdb_client import OmdbAdapter
from backend.resilience import CircuitBreaker
from backend.resolution import Resolution, ResolutionPipeline
from backend.streaming_client import StreamingCatalogAdapter
from backend.tmdb_client import TmdbAdapter
from backend.youtube_client import YoutubeAdapter


class CatalogService:
    def __init__(
        self,
        pipeline: ResolutionPipeline,
        enricher: ImageEnricher,
        *,
        enrich_enabled: bool = True,
    ) -> None:
        self._pipeline = pipeline
        self._enricher = enricher
        self._enrich_enabled = enrich_enabled

    def _finish(self, resolution: Resolution) -> MovieResponse:
        response = resolution.response
        if resolution.is_mock or not self._enrich_enabled or not response.results:
            return response
        return response.with_results(self._enricher.enrich(response.results))

    def search_by_title(self, title: str, page: int = 1) -> MovieResponse:
        return self._finish(self._pipeline.search_by_title(title, page))

    def trending(self, page: int = 1) -> MovieResponse:
        return self._finish(self._pipeline.trending(page))

    def by_genre(self, genre_id: GenreId, page: int = 1) -> MovieResponse:
        return self._finish(self._pipeline.by_genre(genre_id, page))

    def by_region(self, region_code: str, page: int = 1, *, today: date | None = None) -> MovieResponse:
        return self._finish(self._pipeline.by_region(region_code, page, today=today))

    def enrich(self, movies: Sequence[Movie]) -> list[Movie]:
        return self._enricher.enrich(movies)

    def get_poster_images(
        self,
        title: str,
        year: int | str | None = None,
        imdb_id: str | None = None,
        tmdb_id: str | int | None = None,
    ) -> PosterResult:
        return self._enricher.get_poster_images(title, year, imdb_id, tmdb_id)


def build_catalog_service(configs: ProviderConfigs | None = None) -> CatalogService:
    cfgs = configs or build_provider_configs()
    breaker = CircuitBreaker(
        failure_threshold=PROVIDER_CIRCUIT_BREAKER_THRESHOLD,
        open_seconds=PROVIDER_CIRCUIT_BREAKER_OPEN_SECONDS,
    )

    streaming = StreamingCatalogAdapter(ProviderHttpClient(cfgs.streaming, breaker=breaker))
    tmdb = TmdbAdapter(ProviderHttpClient(cfgs.tmdb, breaker=breaker))
    omdb = OmdbAdapter(ProviderHttpClient(cfgs.omdb, breaker=breaker))
    youtube = YoutubeAdapter(ProviderHttpClient(cfgs.youtube, breaker=breaker))

    missing = [c.name for c in (cfgs.streaming, cfgs.tmdb, cfgs.omdb, cfgs.youtube) if not c.has_credentials]
    if missing:
        logger.warning(f"No API key configured for: {', '.join(missing)} (those tiers will be skipped)")

    return CatalogService(
        ResolutionPipeline(streaming, tmdb),
        ImageEnricher(tmdb, omdb, youtube, max_workers=ENRICH_MAX_WORKERS),
        enrich_enabled=ENRICH_ENABLED,
    )
