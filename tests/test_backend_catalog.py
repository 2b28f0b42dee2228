from dataclasses import replace

from conftest import make_movie, make_response
from backend.catalog import CatalogService, build_catalog_service
from backend.config_providers import ProviderConfig, ProviderConfigs
from backend.resolution import MOCK_TIER, Resolution, TierOutcome


class StubPipeline:
    def __init__(self, resolution):
        self.resolution = resolution
        self.calls = []

    def search_by_title(self, title, page=1):
        self.calls.append(("search", title, page))
        return self.resolution

    def trending(self, page=1):
        self.calls.append(("trending", page))
        return self.resolution

    def by_genre(self, genre_id, page=1):
        self.calls.append(("genre", genre_id, page))
        return self.resolution

    def by_region(self, region_code, page=1, today=None):
        self.calls.append(("region", region_code, page))
        return self.resolution


class MarkingEnricher:
    def __init__(self):
        self.seen = []

    def enrich(self, movies):
        self.seen.append(list(movies))
        return [replace(m, trailer_thumbnail="https://thumb") for m in movies]


def _resolution(tier, *movies):
    resp = make_response(*movies)
    return Resolution(response=resp, tier=tier, outcomes=(TierOutcome(tier=tier, response=resp),))


def test_live_results_are_enriched():
    enricher = MarkingEnricher()
    service = CatalogService(StubPipeline(_resolution("primary", make_movie(id=1), make_movie(id=2))), enricher)

    resp = service.search_by_title("x", 2)

    assert [m.trailer_thumbnail for m in resp.results] == ["https://thumb", "https://thumb"]
    assert resp.total_pages == 3
    assert len(enricher.seen) == 1


def test_mock_results_bypass_enrichment():
    enricher = MarkingEnricher()
    resolution = _resolution(MOCK_TIER, make_movie(id=1, source="mock"))
    service = CatalogService(StubPipeline(resolution), enricher)

    assert service.trending(1) is resolution.response
    assert enricher.seen == []


def test_enrichment_can_be_disabled():
    enricher = MarkingEnricher()
    resolution = _resolution("primary", make_movie())
    service = CatalogService(StubPipeline(resolution), enricher, enrich_enabled=False)

    assert service.by_genre(28) is resolution.response
    assert enricher.seen == []


def _configs_without_keys():
    def cfg(name):
        return ProviderConfig(name=name, base_url="https://unused.example", api_key=None, auth_placement="param", auth_name="k")

    return ProviderConfigs(streaming=cfg("streaming"), tmdb=cfg("tmdb"), omdb=cfg("omdb"), youtube=cfg("youtube"))


def test_build_catalog_service_without_keys_serves_mock():
    service = build_catalog_service(_configs_without_keys())

    resp = service.search_by_title("batman", 1)

    assert resp.total_pages == 1
    assert resp.results
    assert all(m.source == "mock" for m in resp.results)
    assert all("batman" in m.title.lower() for m in resp.results)


def test_enrich_passthrough_without_keys():
    service = build_catalog_service(_configs_without_keys())
    m = make_movie()

    assert service.enrich([m]) == [m]
