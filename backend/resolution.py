from __future__ import annotations

"""
backend/resolution.py

Resolución multi-proveedor: cada intención (search / trending / genre / region) tiene un
plan explícito de tiers con nombre, que se prueban estrictamente en orden:

    intent     primary                          secondary           mock (terminal)
    --------   ------------------------------   -----------------   -----------------------
    search     streaming.search_by_title        tmdb.search_movies  filtro por título
    trending   streaming.search_by_title("")    tmdb.popular        catálogo completo
    genre      streaming.by_genre               -                   filtro por género
    region     streaming.by_region              -                   8 primeras reetiquetadas

Reglas:
- El primer tier que devuelve sin lanzar gana entero (no se mezclan resultados).
- Ningún tier se reintenta. Cualquier excepción de un tier se captura, se loguea,
  se cuenta en METRICS y se pasa al siguiente.
- El mock es el final: si también lanza => FallbackUnavailableError.
- Una búsqueda con título vacío / en blanco ES trending.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Literal

from backend import logger
from backend import mock_catalog
from backend.errors import FallbackUnavailableError
from backend.models import GenreId, MovieResponse
from backend.run_metrics import METRICS, RunMetrics
from backend.streaming_client import StreamingCatalogAdapter
from backend.tmdb_client import TmdbAdapter

Intent = Literal["search", "trending", "genre", "region"]

MOCK_TIER = "mock"


@dataclass(frozen=True)
class Tier:
    name: str
    fetch: Callable[[], MovieResponse]


@dataclass(frozen=True)
class TierOutcome:
    tier: str
    response: MovieResponse | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None


@dataclass(frozen=True)
class Resolution:
    response: MovieResponse
    tier: str
    outcomes: tuple[TierOutcome, ...]

    @property
    def is_mock(self) -> bool:
        return self.tier == MOCK_TIER


class ResolutionPipeline:
    def __init__(
        self,
        streaming: StreamingCatalogAdapter,
        tmdb: TmdbAdapter,
        *,
        metrics: RunMetrics | None = None,
    ) -> None:
        self._streaming = streaming
        self._tmdb = tmdb
        self._metrics = metrics or METRICS

    # --------------------------------------------------------
    # Núcleo
    # --------------------------------------------------------

    def resolve(
        self,
        intent: Intent,
        tiers: list[Tier],
        mock: Callable[[], MovieResponse],
    ) -> Resolution:
        outcomes: list[TierOutcome] = []

        for tier in tiers:
            try:
                response = tier.fetch()
            except Exception as exc:
                self._metrics.incr(f"resolve.{intent}.{tier.name}.error")
                self._metrics.add_error("resolve", intent, endpoint=tier.name, detail=repr(exc))
                logger.warning(f"[{intent}] tier '{tier.name}' failed: {exc}")
                outcomes.append(TierOutcome(tier=tier.name, error=exc))
                continue

            self._metrics.incr(f"resolve.{intent}.{tier.name}.ok")
            logger.debug_ctx(
                "RESOLVE",
                f"{intent}: tier '{tier.name}' won with {len(response.results)} movies",
            )
            outcomes.append(TierOutcome(tier=tier.name, response=response))
            return Resolution(response=response, tier=tier.name, outcomes=tuple(outcomes))

        try:
            response = mock()
        except Exception as exc:
            self._metrics.add_error("resolve", intent, endpoint=MOCK_TIER, detail=repr(exc))
            logger.error(f"[{intent}] mock fallback failed: {exc!r}", always=True)
            raise FallbackUnavailableError(intent, exc) from exc

        self._metrics.incr(f"resolve.{intent}.{MOCK_TIER}")
        logger.warning(
            f"[{intent}] all providers failed; serving {len(response.results)} mock movies",
            always=True,
        )
        outcomes.append(TierOutcome(tier=MOCK_TIER, response=response))
        return Resolution(response=response, tier=MOCK_TIER, outcomes=tuple(outcomes))

    # --------------------------------------------------------
    # Intenciones
    # --------------------------------------------------------

    def search_by_title(self, title: str, page: int = 1) -> Resolution:
        query = (title or "").strip()
        if not query:
            return self.trending(page)

        return self.resolve(
            "search",
            [
                Tier("primary", lambda: self._streaming.search_by_title(query, page)),
                Tier("secondary", lambda: self._tmdb.search_movies(query, page)),
            ],
            lambda: mock_catalog.mock_response(mock_catalog.filter_by_title(query), page=page),
        )

    def trending(self, page: int = 1) -> Resolution:
        return self.resolve(
            "trending",
            [
                Tier("primary", lambda: self._streaming.search_by_title("", page)),
                Tier("secondary", lambda: self._tmdb.popular(page)),
            ],
            lambda: mock_catalog.mock_response(mock_catalog.all_movies(), page=page),
        )

    def by_genre(self, genre_id: GenreId, page: int = 1) -> Resolution:
        return self.resolve(
            "genre",
            [Tier("primary", lambda: self._streaming.by_genre(genre_id, page))],
            lambda: mock_catalog.mock_response(mock_catalog.filter_by_genre(genre_id), page=page),
        )

    def by_region(self, region_code: str, page: int = 1, *, today: date | None = None) -> Resolution:
        return self.resolve(
            "region",
            [Tier("primary", lambda: self._streaming.by_region(region_code, page, today=today))],
            lambda: mock_catalog.mock_response(mock_catalog.region_movies(region_code), page=page),
        )
