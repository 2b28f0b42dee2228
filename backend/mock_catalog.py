from __future__ import annotations

"""
backend/mock_catalog.py

Catálogo estático (solo lectura) usado como tier terminal cuando TODOS los proveedores
fallan. Es el que garantiza que la resolución nunca falla hacia el caller.

- Sin paginación: las respuestas mock siempre reportan total_pages=1.
- Las respuestas mock NO pasan por el enrichment (se consideran finales).
"""

from typing import Final

from backend.models import GenreId, Movie, MovieResponse

_POSTER_BASE: Final[str] = "https://image.tmdb.org/t/p/w500"
_BACKDROP_BASE: Final[str] = "https://image.tmdb.org/t/p/original"

# Subconjunto que se reetiqueta para las consultas por región
REGION_MOCK_LIMIT: Final[int] = 8

# region_code -> (prefijo de id, etiqueta de título)
REGION_LABELS: Final[dict[str, tuple[str, str]]] = {
    "ng": ("nw", "Nollywood"),
    "in": ("bw", "Bollywood"),
    "gh": ("gw", "Ghallywood"),
}


def _mock(
    movie_id: int,
    title: str,
    overview: str,
    poster: str,
    backdrop: str,
    release_date: str,
    vote_average: float,
    vote_count: int,
    popularity: float,
    genre_ids: tuple[GenreId, ...],
) -> Movie:
    return Movie(
        id=movie_id,
        title=title,
        overview=overview,
        poster_path=f"{_POSTER_BASE}{poster}",
        backdrop_path=f"{_BACKDROP_BASE}{backdrop}",
        release_date=release_date,
        vote_average=vote_average,
        vote_count=vote_count,
        popularity=popularity,
        genre_ids=genre_ids,
        tmdb_id=str(movie_id),
        source="mock",
    )


MOCK_MOVIES: Final[tuple[Movie, ...]] = (
    _mock(
        155, "The Dark Knight",
        "Batman raises the stakes in his war on crime against a criminal mastermind known as the Joker.",
        "/qJ2tW6WMUDux911r6m7haRef0WH.jpg", "/nMKdUUepR0i5zn0y1T4CsSB5chy.jpg",
        "2008-07-16", 8.5, 31000, 98.4, (18, 28, 80, 53),
    ),
    _mock(
        272, "Batman Begins",
        "Driven by tragedy, billionaire Bruce Wayne dedicates his life to uncovering and defeating corruption.",
        "/4MpN4kIEqUjW8OPtOQJXlTdHiJV.jpg", "/lh5lbisD4oDbEKgUxoRaZU8HVrk.jpg",
        "2005-06-10", 7.7, 20500, 62.1, (28, 80, 18),
    ),
    _mock(
        414906, "The Batman",
        "In his second year of fighting crime, Batman uncovers corruption in Gotham City.",
        "/74xTEgt7R36Fpooo50r9T25onhq.jpg", "/b0PlSFdDwbyK0cf5RxwDpaOJQvQ.jpg",
        "2022-03-01", 7.7, 9800, 145.3, (80, 9648, 53),
    ),
    _mock(
        27205, "Inception",
        "A thief who steals corporate secrets through dream-sharing technology is given an inverse task.",
        "/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg", "/8ZTVqvKDQ8emSGUEMjsS4yHAwrp.jpg",
        "2010-07-15", 8.4, 35000, 88.7, (28, 878, 12),
    ),
    _mock(
        157336, "Interstellar",
        "A team of explorers travel through a wormhole in space to ensure humanity's survival.",
        "/gEU2QniE6E77NI6lCU6MxlNBvIx.jpg", "/xJHokMbljvjADYdit5fK5VQsXEG.jpg",
        "2014-11-05", 8.4, 33000, 110.2, (12, 18, 878),
    ),
    _mock(
        603, "The Matrix",
        "A computer hacker learns about the true nature of reality and his role in the war against its controllers.",
        "/f89U3ADr1oiB1s9GkdPOEpXUk5H.jpg", "/fNG7i7RqMErkcqhohV2a6cV1Ehy.jpg",
        "1999-03-30", 8.2, 24000, 75.9, (28, 878),
    ),
    _mock(
        680, "Pulp Fiction",
        "The lives of two mob hitmen, a boxer and a pair of diner bandits intertwine in four tales of violence.",
        "/d5iIlFn5s0ImszYzBPb8JPIfbXD.jpg", "/suaEOtk1N1sgg2MTM7oZd2cfVp3.jpg",
        "1994-09-10", 8.5, 27000, 70.3, (53, 80),
    ),
    _mock(
        13, "Forrest Gump",
        "A man with a low IQ has accomplished great things in his life and been present during significant events.",
        "/arw2vcBveWOVZr6pxd9XTd1TdQa.jpg", "/qdIMHd4sEfJSckfVJfKQvisL02a.jpg",
        "1994-06-23", 8.5, 26000, 65.5, (35, 18, 10749),
    ),
    _mock(
        129, "Spirited Away",
        "A young girl wanders into a world ruled by gods, witches and spirits, where humans are changed into beasts.",
        "/39wmItIWsg5sZMyRUHLkWBcuVCM.jpg", "/Ab8mkHmkYADjU7wQiOkia9BzGvS.jpg",
        "2001-07-20", 8.5, 15800, 80.1, (16, 10751, 14),
    ),
    _mock(
        238, "The Godfather",
        "The aging patriarch of an organized crime dynasty transfers control of his empire to his reluctant son.",
        "/3bhkrj58Vtu7enYsRolD1fZdja1.jpg", "/tmU7GeKVybMWFButWEGl2M4GeiP.jpg",
        "1972-03-14", 8.7, 19500, 90.6, (18, 80),
    ),
    _mock(
        694, "The Shining",
        "Jack Torrance accepts a caretaker job at the Overlook Hotel, where he and his family spend the winter.",
        "/xazWoLealQwEgqZ89MLZklLZD3k.jpg", "/mmd1HnuvAzFc4iuVJcnBrhDNEKr.jpg",
        "1980-05-23", 8.2, 16700, 45.2, (27, 53),
    ),
    _mock(
        120, "The Lord of the Rings: The Fellowship of the Ring",
        "Young hobbit Frodo Baggins sets out on a journey to destroy the One Ring.",
        "/6oom5QYQ2yQTMJIbnvbkBL9cHo6.jpg", "/x2RS3uTcsJJ9IfjNPcgDmukoEcQ.jpg",
        "2001-12-18", 8.4, 24500, 85.0, (12, 14, 28),
    ),
)


def all_movies() -> tuple[Movie, ...]:
    return MOCK_MOVIES


def filter_by_title(title: str) -> tuple[Movie, ...]:
    """Substring case-insensitive; título vacío => catálogo completo."""
    needle = (title or "").strip().lower()
    if not needle:
        return MOCK_MOVIES
    return tuple(m for m in MOCK_MOVIES if needle in m.title.lower())


def filter_by_genre(genre_id: GenreId) -> tuple[Movie, ...]:
    """28 y "28" son el mismo género (los ids llegan como texto desde la URL)."""
    wanted = str(genre_id).strip()
    return tuple(m for m in MOCK_MOVIES if wanted in {str(g) for g in m.genre_ids})


def region_label(region_code: str) -> tuple[str, str]:
    """(prefijo_id, etiqueta) para una región; por defecto el propio código."""
    code = (region_code or "").strip().lower()
    return REGION_LABELS.get(code, (code or "rg", code.upper() or "Regional"))


def region_movies(region_code: str) -> tuple[Movie, ...]:
    """
    Reetiqueta un subconjunto del catálogo como cine de la región.
    El id lleva prefijo para no colisionar con ids reales de proveedores.
    """
    prefix, label = region_label(region_code)
    return tuple(
        Movie(
            id=f"{prefix}_{m.id}",
            title=f"{label}: {m.title}",
            overview=m.overview,
            poster_path=m.poster_path,
            backdrop_path=m.backdrop_path,
            release_date=m.release_date,
            vote_average=m.vote_average,
            vote_count=m.vote_count,
            popularity=m.popularity,
            genre_ids=m.genre_ids,
            tmdb_id=m.tmdb_id,
            source="mock",
        )
        for m in MOCK_MOVIES[:REGION_MOCK_LIMIT]
    )


def mock_response(results: tuple[Movie, ...], *, page: int) -> MovieResponse:
    """Las respuestas mock no están paginadas: total_pages=1."""
    return MovieResponse(
        page=max(1, int(page)),
        results=results,
        total_pages=1,
        total_results=len(results),
    )
