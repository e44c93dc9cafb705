#  Place Search - Configuration
#
#  Loads config.json and provides typed access to all settings.
#  Dot-notation path lookup: cfg("rate_limit.capacity")
#
#  Depends on: config.json
#  Used by:    all placesearch modules

import json
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = PROJECT_ROOT / "config.json"
DATA_DIR = PROJECT_ROOT / "data"

# ---------------------------------------------------------------------------
# Load config
# ---------------------------------------------------------------------------

_config: dict = {}


def _load_config(path: Path | None = None):
    """Load configuration from JSON file (internal, called once at import time).

    Module-level constants below are snapshots from _config.
    Do not call this function after import: constants won't update.
    """
    global _config
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. "
            "Copy config.example.json to config.json."
        )
    with open(config_path) as f:
        _config = json.load(f)


# Missing config.json is fine: every setting has a default
if CONFIG_PATH.exists():
    _load_config()


def cfg(path: str, default=None):
    """Get a config value by dot-notation path.

    Example: cfg("cache.live_ttl_seconds") -> 600
    """
    keys = path.split(".")
    val = _config
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val


# ---------------------------------------------------------------------------
# Convenience constants
# ---------------------------------------------------------------------------

HOST = cfg("server.host", "0.0.0.0")
PORT = cfg("server.port", 8787)
CORS_ORIGINS = cfg("server.cors_origins", [
    "http://localhost:5173",
    f"http://localhost:{PORT}",
    "http://127.0.0.1:5173",
    f"http://127.0.0.1:{PORT}",
])

# Upstream geo-search provider
GOOGLE_PLACES_API_KEY = os.environ.get("GOOGLE_PLACES_API_KEY", "")
PLACES_ENDPOINT = cfg("places.endpoint", "https://places.googleapis.com/v1/places:searchNearby")
PLACES_TIMEOUT = cfg("places.timeout", 10.0)
PLACES_LANGUAGE_CODE = cfg("places.language_code", "en")
PLACES_INCLUDED_TYPES = cfg("places.included_types", ["restaurant"])

# Rate limiting (token bucket per client)
RATE_LIMIT_CAPACITY = cfg("rate_limit.capacity", 10)
RATE_LIMIT_INTERVAL_MS = cfg("rate_limit.interval_ms", 60_000)
RATE_LIMIT_BUCKET_TTL = cfg("rate_limit.bucket_ttl_seconds", 120)

# Response cache
CACHE_LIVE_TTL = cfg("cache.live_ttl_seconds", 600)
CACHE_MOCK_TTL = cfg("cache.mock_ttl_seconds", 120)

# Key-value store
STORE_BACKEND = cfg("store.backend", "sqlite")
STORE_PATH = cfg("store.path", str(DATA_DIR / "placesearch.db"))

# Static map references (resolved by the image proxy, never fetched here)
STATIC_MAP_BASE_URL = cfg("static_map.base_url", "/api/static-map")

_STORE_BACKENDS = ("sqlite", "memory")


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------

def validate_config():
    """Validate critical config values. Call during app startup (not at import time).

    Raises ConfigError for fatal issues, logs warnings for non-fatal ones.
    """
    import logging
    _logger = logging.getLogger("placesearch.config")

    # Fatal: port must be valid
    if not isinstance(PORT, int) or not (1 <= PORT <= 65535):
        raise ConfigError(f"server.port must be 1-65535, got {PORT}")

    # Fatal: bucket arithmetic needs positive capacity and interval
    for label, val in [("rate_limit.capacity", RATE_LIMIT_CAPACITY),
                       ("rate_limit.interval_ms", RATE_LIMIT_INTERVAL_MS),
                       ("rate_limit.bucket_ttl_seconds", RATE_LIMIT_BUCKET_TTL)]:
        if not isinstance(val, (int, float)) or val <= 0:
            raise ConfigError(f"{label} must be > 0, got {val}")

    # Fatal: cache TTLs must be positive
    for label, val in [("cache.live_ttl_seconds", CACHE_LIVE_TTL),
                       ("cache.mock_ttl_seconds", CACHE_MOCK_TTL),
                       ("places.timeout", PLACES_TIMEOUT)]:
        if not isinstance(val, (int, float)) or val <= 0:
            raise ConfigError(f"{label} must be > 0, got {val}")

    # Fatal: unknown store backend
    if STORE_BACKEND not in _STORE_BACKENDS:
        raise ConfigError(
            f"store.backend must be one of {', '.join(_STORE_BACKENDS)}, got '{STORE_BACKEND}'"
        )

    # Fatal: CORS origins must be valid URLs
    for origin in CORS_ORIGINS:
        if not isinstance(origin, str):
            raise ConfigError(f"CORS origin must be a string, got {type(origin).__name__}")
        if origin == "*":
            _logger.warning("CORS origin '*' allows all origins, not recommended for production")
        elif not origin.startswith(("http://", "https://")):
            raise ConfigError(
                f"CORS origin must start with http:// or https://, got '{origin}'"
            )

    # Warning: no upstream credential means every search is synthesized
    if not GOOGLE_PLACES_API_KEY:
        _logger.warning(
            "GOOGLE_PLACES_API_KEY is not set. Searches will return "
            "synthesized placeholder results."
        )

    if STORE_BACKEND == "memory":
        _logger.warning(
            "store.backend is 'memory'; rate-limit buckets and cached "
            "responses are lost on restart"
        )


class ConfigError(Exception):
    """Raised when critical configuration is invalid."""
