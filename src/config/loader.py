"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
#   1. config/config.yaml  - static defaults checked into the repo
#                            (fan-out limits, cache TTLs)
#   2. .env file           - local developer overrides (not committed)
#   3. Environment vars    - set at deploy time
#
# load_config() reads the YAML file, then deep-merges the env-derived
# values from Settings on top.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from src.config.settings import Settings

# Used when config/config.yaml is absent or omits a key.
AGGREGATION_DEFAULTS: dict[str, int] = {
    "listener_concurrency": 8,
    "geocode_concurrency": 4,
    "geocode_max_locations": 25,
    "artwork_concurrency": 6,
    "album_detail_concurrency": 6,
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict[str, Any]:
    """Load YAML config and merge environment-based Settings on top.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings instance to merge; a fresh one is read from the
            environment when omitted.

    Returns:
        Fully resolved configuration dictionary.  The ``aggregation``
        section always contains every key of :data:`AGGREGATION_DEFAULTS`.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config: dict[str, Any] = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "providers": {
            "spotify_configured": bool(settings.spotify_client_id and settings.spotify_client_secret),
            "lastfm_configured": bool(settings.lastfm_api_key),
            "spotify_market": settings.spotify_market,
            "itunes_country": settings.itunes_country,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)

    aggregation = dict(AGGREGATION_DEFAULTS)
    aggregation.update(yaml_config.get("aggregation") or {})
    yaml_config["aggregation"] = aggregation
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
