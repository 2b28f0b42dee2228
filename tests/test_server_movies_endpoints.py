import pytest

pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from conftest import FailingTransport, FakeTransport
import server.api.deps as deps
from backend import mock_catalog
from backend.catalog import CatalogService
from backend.enrichment import ImageEnricher
from backend.omdb_client import OmdbAdapter
from backend.resolution import ResolutionPipeline
from backend.streaming_client import StreamingCatalogAdapter
from backend.tmdb_client import TmdbAdapter
from backend.youtube_client import YoutubeAdapter
from server.api.app import create_app
from server.api.middleware.errors import FALLBACK_UNAVAILABLE_MESSAGE


def _service(streaming_transport=None, tmdb_transport=None, youtube_transport=None):
    tmdb = TmdbAdapter(tmdb_transport or FailingTransport("tmdb"))
    return CatalogService(
        ResolutionPipeline(StreamingCatalogAdapter(streaming_transport or FailingTransport("streaming")), tmdb),
        ImageEnricher(
            tmdb,
            OmdbAdapter(FailingTransport("omdb")),
            YoutubeAdapter(youtube_transport or FailingTransport("youtube")),
            max_workers=2,
        ),
    )


def _client(service):
    app = create_app()
    app.dependency_overrides[deps.get_catalog_service] = lambda: service
    return TestClient(app, raise_server_exceptions=False)


def test_search_all_down_returns_mock_batman():
    client = _client(_service())

    res = client.get("/movies/search", params={"title": "batman", "page": 2})

    assert res.status_code == 200
    body = res.json()
    assert body["page"] == 2
    assert body["total_pages"] == 1
    assert body["results"]
    assert all("batman" in m["title"].lower() for m in body["results"])


def test_trending_live_results_are_enriched():
    streaming = FakeTransport(
        provider="streaming",
        routes={
            "/shows/search/title": {
                "result": [{"tmdbID": "27205", "title": "Inception", "year": 2010, "tmdbRating": 84}],
                "total_pages": 5,
            }
        },
    )
    youtube = FakeTransport(provider="youtube", routes={"/search": {"items": [{"id": {"videoId": "vid1"}}]}})
    client = _client(_service(streaming_transport=streaming, youtube_transport=youtube))

    res = client.get("/movies/trending")

    assert res.status_code == 200
    body = res.json()
    assert body["total_pages"] == 5
    movie = body["results"][0]
    assert movie["vote_average"] == 8.4
    assert movie["trailer_thumbnail"] == "https://img.youtube.com/vi/vid1/maxresdefault.jpg"
    assert movie["backdrop_path"] == movie["trailer_thumbnail"]
    assert streaming.calls[0].params["title"] == ""


def test_genre_and_region_fall_back_to_mock():
    client = _client(_service())

    genre = client.get("/movies/genre/878").json()
    assert [m["id"] for m in genre["results"]] == [m.id for m in mock_catalog.filter_by_genre(878)]

    region = client.get("/movies/region/NG").json()
    assert len(region["results"]) == 8
    assert region["results"][0]["title"].startswith("Nollywood: ")


def test_enrich_endpoint_keeps_order_and_unfound_movies():
    client = _client(_service())
    movies = [
        {"id": 1, "title": "A", "poster_path": "https://x/a.jpg"},
        {"id": "tt2", "title": "B", "genre_ids": [1, 2]},
    ]

    res = client.post("/movies/enrich", json=movies)

    assert res.status_code == 200
    out = res.json()
    assert [m["id"] for m in out] == [1, "tt2"]
    assert out[0]["poster_path"] == "https://x/a.jpg"
    assert out[1]["genre_ids"] == [1, 2]


def test_fallback_unavailable_maps_to_503(monkeypatch):
    def _broken(*args, **kwargs):
        raise RuntimeError("table unavailable")

    monkeypatch.setattr(mock_catalog, "all_movies", _broken)
    client = _client(_service())

    res = client.get("/movies/trending")

    assert res.status_code == 503
    assert res.json()["detail"] == FALLBACK_UNAVAILABLE_MESSAGE


def test_images_endpoint_single_title_lookup():
    tmdb = FakeTransport(
        provider="tmdb",
        routes={"/movie/155": {"poster_path": "/dk.jpg", "backdrop_path": "/dk_b.jpg"}},
    )
    youtube = FakeTransport(provider="youtube", routes={"/search": {"items": [{"id": {"videoId": "EXeTwQWrcwY"}}]}})
    client = _client(_service(tmdb_transport=tmdb, youtube_transport=youtube))

    res = client.get("/movies/images", params={"title": "The Dark Knight", "year": 2008, "tmdb_id": "155"})

    assert res.status_code == 200
    assert res.json() == {
        "poster_url": "https://image.tmdb.org/t/p/w500/dk.jpg",
        "backdrop_url": "https://image.tmdb.org/t/p/original/dk_b.jpg",
        "thumbnail_url": "https://img.youtube.com/vi/EXeTwQWrcwY/maxresdefault.jpg",
    }
    assert [c.path for c in tmdb.calls] == ["/movie/155"]
    assert youtube.calls[0].params == {"q": "The Dark Knight 2008 official trailer"}


def test_images_endpoint_all_down_is_empty_and_requires_title():
    client = _client(_service())

    res = client.get("/movies/images", params={"title": "Nothing"})
    assert res.status_code == 200
    assert res.json() == {"poster_url": None, "backdrop_url": None, "thumbnail_url": None}

    assert client.get("/movies/images").status_code == 422
