"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from (highest priority first):
#
#   1. **Environment variables** - e.g. SPOTIFY_CLIENT_ID=abc123
#   2. **.env file** - key=value lines in the project root .env file
#
# Field `spotify_client_id` maps to env var `SPOTIFY_CLIENT_ID`.
#
# Missing credentials are not a startup error: the provider that needs
# them reports is_available() == False and raises ConfigurationError
# when called.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Groupie Tracker application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Artist providers ===
    # Empty string = "not configured".
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_market: str = "FR"
    itunes_country: str = "FR"

    # === Enrichment ===
    lastfm_api_key: str = ""

    # === Upstream HTTP ===
    http_user_agent: str = "groupie-tracker/0.1 (+https://groupietrackers.herokuapp.com)"
    lookup_timeout: float = 5.0   # token, listeners, wiki, single lookups
    search_timeout: float = 8.0   # search and listing calls
    geocode_timeout: float = 6.0

    # === Caching ===
    dataset_cache_ttl: float = 600.0
    artwork_cache_ttl: float = 1800.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8080
    app_env: str = "development"
    log_level: str = "INFO"

    def get_missing_credentials(self) -> list[str]:
        """Return the names of optional features disabled by missing credentials."""
        missing: list[str] = []
        if not (self.spotify_client_id and self.spotify_client_secret):
            missing.append("spotify")
        if not self.lastfm_api_key:
            missing.append("lastfm")
        return missing
