import math

from backend.models import (
    Movie,
    MovieResponse,
    PosterResult,
    derive_total_pages,
    rating_0_10,
    release_date_from_year,
    safe_float,
)


def test_rating_0_10_clamps_and_defaults():
    assert rating_0_10(85, divisor=10) == 8.5
    assert rating_0_10(150, divisor=10) == 10.0
    assert rating_0_10(-5) == 0.0
    assert rating_0_10(None) == 0.0
    assert rating_0_10("bad") == 0.0
    assert rating_0_10(float("nan")) == 0.0
    assert rating_0_10(7.3) == 7.3


def test_safe_float_rejects_nan_and_inf():
    assert safe_float(float("nan")) is None
    assert safe_float(math.inf) is None
    assert safe_float("2.5") == 2.5
    assert safe_float(True) is None


def test_release_date_from_year():
    assert release_date_from_year(2021) == "2021-01-01"
    assert release_date_from_year("1999") == "1999-01-01"
    assert release_date_from_year(None) == ""
    assert release_date_from_year("n/a") == ""


def test_derive_total_pages():
    assert derive_total_pages(total_pages=2.2) == 3
    assert derive_total_pages(total_results=41) == 3
    assert derive_total_pages() == 1
    assert derive_total_pages(total_pages=0, total_results=0) == 1


def test_movie_response_build_caps_results_and_defaults_totals():
    movies = [Movie(id=i, title=f"m{i}") for i in range(25)]
    resp = MovieResponse.build(page=2, results=movies)

    assert len(resp.results) == 20
    assert resp.page == 2
    assert resp.total_pages == 1
    assert resp.total_results == 20


def test_movie_year_and_dict_roundtrip_fields():
    m = Movie(id="tt1", title="X", release_date="2019-05-01", genre_ids=(1, "drama"))
    assert m.year == 2019
    assert Movie(release_date="").year is None

    data = m.to_dict()
    assert data["genre_ids"] == [1, "drama"]
    assert all(v is not None for v in data.values())


def test_movie_from_dict_tolerates_garbage():
    m = Movie.from_dict(
        {
            "id": 5,
            "title": None,
            "vote_average": 42,
            "vote_count": "x",
            "genre_ids": "nope",
            "source": "other",
        }
    )
    assert m.id == 5
    assert m.title == ""
    assert m.vote_average == 10.0
    assert m.vote_count == 0
    assert m.genre_ids == ()
    assert m.source == "streaming"


def test_poster_result_is_empty():
    assert PosterResult().is_empty
    assert not PosterResult(thumbnail_url="https://x").is_empty
