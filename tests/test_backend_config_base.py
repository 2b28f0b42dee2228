import backend.config_base as cfg


def test_clean_env_raw():
    assert cfg._clean_env_raw(None) is None
    assert cfg._clean_env_raw("  ") is None
    assert cfg._clean_env_raw("'value'") == "value"
    assert cfg._clean_env_raw('"value"') == "value"
    assert cfg._clean_env_raw("  value ") == "value"


def test_get_env_parsers(monkeypatch):
    monkeypatch.delenv("TEST_STR", raising=False)
    assert cfg._get_env_str("TEST_STR", "default") == "default"

    monkeypatch.setenv("TEST_STR", "  hello ")
    assert cfg._get_env_str("TEST_STR", "default") == "hello"

    monkeypatch.setenv("TEST_INT", "10")
    assert cfg._get_env_int("TEST_INT", 1) == 10
    monkeypatch.setenv("TEST_INT", "bad")
    assert cfg._get_env_int("TEST_INT", 1) == 1

    monkeypatch.setenv("TEST_FLOAT", "3.5")
    assert cfg._get_env_float("TEST_FLOAT", 1.0) == 3.5
    monkeypatch.setenv("TEST_FLOAT", "bad")
    assert cfg._get_env_float("TEST_FLOAT", 1.0) == 1.0

    monkeypatch.setenv("TEST_BOOL", "yes")
    assert cfg._get_env_bool("TEST_BOOL", False) is True
    monkeypatch.setenv("TEST_BOOL", "no")
    assert cfg._get_env_bool("TEST_BOOL", True) is False
    monkeypatch.setenv("TEST_BOOL", "maybe")
    assert cfg._get_env_bool("TEST_BOOL", True) is True


def test_caps():
    assert cfg._cap_int("CAP", 1, min_v=3, max_v=5) == 3
    assert cfg._cap_int("CAP", 10, min_v=3, max_v=5) == 5
    assert cfg._cap_int("CAP", 4, min_v=3, max_v=5) == 4

    assert cfg._cap_float_min("CAPF", 0.1, min_v=0.5) == 0.5
    assert cfg._cap_float_min("CAPF", 0.6, min_v=0.5) == 0.6


def test_sanitize_filename_component():
    assert cfg._sanitize_filename_component(" run 1 ") == "run_1"
    assert cfg._sanitize_filename_component("a/b") == "a_b"


def test_invalid_env_values_warn_and_keep_default(monkeypatch):
    warnings = []
    monkeypatch.setattr(cfg._logger, "warning", lambda msg, **kw: warnings.append(msg))
    monkeypatch.setenv("TEST_INT", "12abc")

    assert cfg._get_env_int("TEST_INT", 7) == 7
    assert cfg._cap_int("CAP", 99, min_v=1, max_v=10) == 10
    assert len(warnings) == 2
    assert "TEST_INT" in warnings[0]
