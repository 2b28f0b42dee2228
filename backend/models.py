from __future__ import annotations

"""
backend/models.py

Modelo canónico, independiente del proveedor:

- Movie: una película tal y como la ve el caller (UI / API).
- MovieResponse: sobre de página (page, results, total_pages, total_results).
- PosterResult: imágenes encontradas por el enrichment (cada una opcional).

Principios
----------
- Ningún campo de Movie es None: strings vacíos / 0 / tupla vacía. El consumidor solo
  comprueba "vacío".
- Inmutables (frozen): el enrichment produce copias con dataclasses.replace().
- Los adapters validan/defaultean en su frontera usando los helpers de este módulo.
- Este módulo NO hace logging ni I/O.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Final, Literal, TypeAlias

MovieId: TypeAlias = str | int
GenreId: TypeAlias = int | str
MovieSource = Literal["streaming", "tmdb", "mock"]

PAGE_SIZE: Final[int] = 20


# ============================================================
# AUX: safe parsing
# ============================================================


def safe_int(value: object) -> int | None:
    """Cast defensivo a int (None/ValueError/TypeError => None)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (ValueError, TypeError, OverflowError):
        return None


def safe_float(value: object) -> float | None:
    """Cast defensivo a float; NaN/inf => None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)  # type: ignore[arg-type]
    except (ValueError, TypeError):
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


def safe_str(value: object) -> str:
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value)


def rating_0_10(raw: object, *, divisor: float = 1.0) -> float:
    """
    Normaliza un rating a la escala 0..10.

    - divisor=10 para proveedores 0..100 (streaming catalog).
    - Ausente / inválido => 0.0 (nunca None ni NaN).
    - Fuera de rango => clamp (no confiamos en el upstream).
    """
    value = safe_float(raw)
    if value is None or divisor <= 0:
        return 0.0
    return min(10.0, max(0.0, value / divisor))


def release_date_from_year(year: object) -> str:
    """year -> "YYYY-01-01" (o "" si no hay año plausible)."""
    y = safe_int(year)
    if y is None or y <= 0:
        return ""
    return f"{y:04d}-01-01"


def year_from_release_date(release_date: str) -> int | None:
    text = (release_date or "").strip()
    if len(text) >= 4 and text[:4].isdigit():
        return int(text[:4])
    return None


# ============================================================
# Movie
# ============================================================


@dataclass(frozen=True)
class Movie:
    id: MovieId = ""
    title: str = ""
    overview: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    release_date: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genre_ids: tuple[GenreId, ...] = ()
    # Identificadores cruzados (cuando el proveedor los da) para el enrichment
    tmdb_id: str = ""
    imdb_id: str = ""
    trailer_thumbnail: str = ""
    source: MovieSource = "streaming"

    @property
    def year(self) -> int | None:
        return year_from_release_date(self.release_date)

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["genre_ids"] = list(self.genre_ids)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Movie":
        """Reconstruye un Movie (p.ej. desde el body de POST /movies/enrich)."""
        raw_id = data.get("id")
        movie_id: MovieId = raw_id if isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool) else ""

        genres_raw = data.get("genre_ids")
        genre_ids: tuple[GenreId, ...] = ()
        if isinstance(genres_raw, Iterable) and not isinstance(genres_raw, (str, bytes, Mapping)):
            genre_ids = tuple(g for g in genres_raw if isinstance(g, (int, str)) and not isinstance(g, bool))

        source_raw = data.get("source")
        source: MovieSource = source_raw if source_raw in ("streaming", "tmdb", "mock") else "streaming"  # type: ignore[assignment]

        return cls(
            id=movie_id,
            title=safe_str(data.get("title")),
            overview=safe_str(data.get("overview")),
            poster_path=safe_str(data.get("poster_path")),
            backdrop_path=safe_str(data.get("backdrop_path")),
            release_date=safe_str(data.get("release_date")),
            vote_average=rating_0_10(data.get("vote_average")),
            vote_count=safe_int(data.get("vote_count")) or 0,
            popularity=safe_float(data.get("popularity")) or 0.0,
            genre_ids=genre_ids,
            tmdb_id=safe_str(data.get("tmdb_id")),
            imdb_id=safe_str(data.get("imdb_id")),
            trailer_thumbnail=safe_str(data.get("trailer_thumbnail")),
            source=source,
        )


# ============================================================
# MovieResponse
# ============================================================


def derive_total_pages(
    *,
    total_pages: object = None,
    total_results: object = None,
    page_size: int = PAGE_SIZE,
) -> int:
    """
    total_pages derivado:
      1) total_pages del proveedor (redondeado hacia arriba)
      2) ceil(total_results / page_size)
      3) 1
    Siempre >= 1.
    """
    tp = safe_float(total_pages)
    if tp is not None and tp > 0:
        return max(1, math.ceil(tp))

    tr = safe_int(total_results)
    if tr is not None and tr > 0 and page_size > 0:
        return max(1, math.ceil(tr / page_size))

    return 1


@dataclass(frozen=True)
class MovieResponse:
    page: int
    results: tuple[Movie, ...]
    total_pages: int = 1
    total_results: int = 0

    @classmethod
    def build(
        cls,
        *,
        page: int,
        results: Iterable[Movie],
        total_pages: object = None,
        total_results: object = None,
        page_size: int = PAGE_SIZE,
    ) -> "MovieResponse":
        items = tuple(results)[: max(1, page_size)]
        tr = safe_int(total_results)
        return cls(
            page=max(1, int(page)),
            results=items,
            total_pages=derive_total_pages(
                total_pages=total_pages,
                total_results=total_results,
                page_size=page_size,
            ),
            total_results=tr if tr is not None and tr >= 0 else len(items),
        )

    def with_results(self, results: Iterable[Movie]) -> "MovieResponse":
        return MovieResponse(
            page=self.page,
            results=tuple(results),
            total_pages=self.total_pages,
            total_results=self.total_results,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "page": self.page,
            "results": [m.to_dict() for m in self.results],
            "total_pages": self.total_pages,
            "total_results": self.total_results,
        }


# ============================================================
# PosterResult
# ============================================================


@dataclass(frozen=True)
class PosterResult:
    poster_url: str | None = None
    backdrop_url: str | None = None
    thumbnail_url: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.poster_url or self.backdrop_url or self.thumbnail_url)


EMPTY_POSTER_RESULT: Final[PosterResult] = PosterResult()
