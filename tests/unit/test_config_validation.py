#  Place Search - Config Validation Tests
#
#  Tests for validate_config() startup checks and cfg() lookup.
#
#  Depends on: placesearch/config.py
#  Used by:    pytest

import logging
from unittest.mock import patch

import pytest

from placesearch import config
from placesearch.config import ConfigError, cfg, validate_config


@pytest.fixture(autouse=True)
def _valid_defaults():
    """Start every test from a known-good configuration."""
    with patch("placesearch.config.PORT", 8787), \
         patch("placesearch.config.GOOGLE_PLACES_API_KEY", "test-key"), \
         patch("placesearch.config.STORE_BACKEND", "sqlite"), \
         patch("placesearch.config.CORS_ORIGINS", ["http://localhost:5173"]):
        yield


class TestValidateConfig:
    def test_passes_with_defaults(self):
        validate_config()  # should not raise

    @pytest.mark.parametrize("port", [0, 70000, "8787"])
    def test_raises_on_bad_port(self, port):
        with patch("placesearch.config.PORT", port):
            with pytest.raises(ConfigError, match="server.port"):
                validate_config()

    @pytest.mark.parametrize("name,label", [
        ("RATE_LIMIT_CAPACITY", "rate_limit.capacity"),
        ("RATE_LIMIT_INTERVAL_MS", "rate_limit.interval_ms"),
        ("RATE_LIMIT_BUCKET_TTL", "rate_limit.bucket_ttl_seconds"),
        ("CACHE_LIVE_TTL", "cache.live_ttl_seconds"),
        ("CACHE_MOCK_TTL", "cache.mock_ttl_seconds"),
        ("PLACES_TIMEOUT", "places.timeout"),
    ])
    def test_raises_on_non_positive(self, name, label):
        with patch(f"placesearch.config.{name}", 0):
            with pytest.raises(ConfigError, match=label):
                validate_config()

    def test_raises_on_unknown_store_backend(self):
        with patch("placesearch.config.STORE_BACKEND", "redis"):
            with pytest.raises(ConfigError, match="store.backend"):
                validate_config()

    def test_raises_on_bad_cors_origin(self):
        with patch("placesearch.config.CORS_ORIGINS", ["localhost:5173"]):
            with pytest.raises(ConfigError, match="CORS origin"):
                validate_config()

    def test_warns_on_wildcard_cors(self, caplog):
        with patch("placesearch.config.CORS_ORIGINS", ["*"]):
            with caplog.at_level(logging.WARNING):
                validate_config()
        assert "allows all origins" in caplog.text

    def test_warns_on_missing_api_key(self, caplog):
        with patch("placesearch.config.GOOGLE_PLACES_API_KEY", ""):
            with caplog.at_level(logging.WARNING):
                validate_config()
        assert "GOOGLE_PLACES_API_KEY is not set" in caplog.text

    def test_warns_on_memory_backend(self, caplog):
        with patch("placesearch.config.STORE_BACKEND", "memory"):
            with caplog.at_level(logging.WARNING):
                validate_config()
        assert "lost on restart" in caplog.text


class TestCfg:
    def test_dot_path_lookup(self):
        with patch.object(config, "_config", {"cache": {"live_ttl_seconds": 900}}):
            assert cfg("cache.live_ttl_seconds") == 900

    def test_missing_path_returns_default(self):
        with patch.object(config, "_config", {"cache": {}}):
            assert cfg("cache.live_ttl_seconds", 600) == 600
            assert cfg("nope.deeper.still") is None

    def test_non_dict_intermediate_returns_default(self):
        with patch.object(config, "_config", {"cache": 5}):
            assert cfg("cache.live_ttl_seconds", 1) == 1

    def test_load_config_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.example.json"):
            config._load_config(tmp_path / "absent.json")
