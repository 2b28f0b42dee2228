from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import pytest

from backend.errors import ProviderError
from backend.models import Movie, MovieResponse
from backend.run_metrics import METRICS

Route = Mapping[str, object] | BaseException | Callable[[Mapping[str, object]], object]


@dataclass(slots=True)
class TransportCall:
    path: str
    params: dict[str, object]


@dataclass
class FakeTransport:
    """
    Doble de ProviderHttpClient con rutas programables.

    routes: path -> payload (dict) | excepción | callable(params) -> payload/excepción.
    Una ruta no registrada lanza ProviderError 404.
    """

    provider: str = "fake"
    routes: dict[str, Route] = field(default_factory=dict)
    calls: list[TransportCall] = field(default_factory=list)

    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> dict[str, object]:
        p = dict(params or {})
        self.calls.append(TransportCall(path=path, params=p))

        route = self.routes.get(path)
        if route is None:
            raise ProviderError(self.provider, f"no route for {path}", status=404)
        if callable(route):
            route = route(p)
        if isinstance(route, BaseException):
            raise route
        return dict(route)  # type: ignore[arg-type]


class FailingTransport:
    """Todas las llamadas fallan como un 503 del proveedor."""

    def __init__(self, provider: str = "fake") -> None:
        self.provider = provider
        self.calls = 0

    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> dict[str, object]:
        self.calls += 1
        raise ProviderError(self.provider, f"GET {path} failed", status=503)


def make_movie(**overrides: object) -> Movie:
    base: dict[str, object] = {
        "id": 1,
        "title": "Some Movie",
        "overview": "An overview.",
        "poster_path": "https://cdn.example/poster.jpg",
        "backdrop_path": "https://cdn.example/backdrop.jpg",
        "release_date": "2020-01-01",
        "vote_average": 7.0,
        "vote_count": 100,
        "popularity": 10.0,
        "genre_ids": (28,),
    }
    base.update(overrides)
    return Movie(**base)  # type: ignore[arg-type]


def make_response(*movies: Movie, page: int = 1, total_pages: int = 3) -> MovieResponse:
    return MovieResponse(page=page, results=tuple(movies), total_pages=total_pages, total_results=len(movies))


@pytest.fixture(autouse=True)
def _reset_metrics():
    METRICS.reset()
    yield
    METRICS.reset()

