from backend.run_metrics import RunMetrics


def test_run_metrics_counters_and_timings():
    metrics = RunMetrics(max_error_events=1)

    metrics.incr("resolve.search.primary.error")
    metrics.incr("resolve.search.primary.error", n=2)

    metrics.observe_ms("tmdb.http.latency_ms", 10)
    metrics.observe_ms("tmdb.http.latency_ms", 30)

    metrics.add_error("tmdb", "search", endpoint="/search/movie", detail="bad")
    metrics.add_error("tmdb", "search", endpoint="/search/movie", detail="worse")

    snap = metrics.snapshot()

    assert snap["counters"]["resolve.search.primary.error"] == 3
    assert metrics.counter("resolve.search.primary.error") == 3
    assert snap["timings_ms"]["tmdb.http.latency_ms"]["count"] == 2.0
    assert snap["timings_ms"]["tmdb.http.latency_ms"]["avg"] == 20.0

    assert snap["derived"]["errors.total"] == 1
    assert snap["derived"]["errors.by_subsystem"]["tmdb"] == 1
    assert snap["errors"][0].detail == "worse"


def test_render_prometheus_sanitizes_names():
    metrics = RunMetrics()
    metrics.incr("enrich.movies", 4)
    metrics.observe_ms("omdb.http.latency_ms", 12.5)

    text = metrics.render_prometheus()

    assert "# TYPE cartelera_enrich_movies counter" in text
    assert "cartelera_enrich_movies 4" in text
    assert "cartelera_omdb_http_latency_ms_count 1" in text
    assert "cartelera_omdb_http_latency_ms_sum 12.500" in text


def test_reset_clears_everything():
    metrics = RunMetrics()
    metrics.incr("a")
    metrics.reset()

    assert metrics.snapshot()["counters"] == {}
    assert metrics.render_prometheus() == ""
