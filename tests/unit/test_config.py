"""Unit tests for settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.loader import AGGREGATION_DEFAULTS, _deep_merge, load_config
from src.config.settings import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SPOTIFY_CLIENT_ID",
        "SPOTIFY_CLIENT_SECRET",
        "LASTFM_API_KEY",
        "APP_PORT",
        "LOG_LEVEL",
        "SPOTIFY_MARKET",
    ):
        monkeypatch.delenv(name, raising=False)


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:
    def test_defaults(self) -> None:
        settings = _settings()
        assert settings.spotify_market == "FR"
        assert settings.app_port == 8080
        assert settings.dataset_cache_ttl == 600.0

    def test_missing_credentials(self) -> None:
        assert _settings().get_missing_credentials() == ["spotify", "lastfm"]
        assert _settings(spotify_client_id="id").get_missing_credentials() == ["spotify", "lastfm"]
        full = _settings(spotify_client_id="id", spotify_client_secret="s", lastfm_api_key="k")
        assert full.get_missing_credentials() == []

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPOTIFY_MARKET", "US")
        monkeypatch.setenv("APP_PORT", "9000")
        settings = _settings()
        assert settings.spotify_market == "US"
        assert settings.app_port == 9000


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=_settings())
        assert config["aggregation"] == AGGREGATION_DEFAULTS
        assert config["providers"]["spotify_configured"] is False
        assert config["logging"]["level"] == "INFO"

    def test_yaml_values_and_env_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "app:\n  name: groupie-tracker\n  version: 9.9.9\n"
            "aggregation:\n  geocode_concurrency: 2\n"
            "logging:\n  level: WARNING\n"
        )
        settings = _settings(lastfm_api_key="k", log_level="DEBUG")

        config = load_config(str(path), settings=settings)

        assert config["app"]["version"] == "9.9.9"
        assert config["app"]["port"] == 8080
        assert config["aggregation"]["geocode_concurrency"] == 2
        assert config["aggregation"]["listener_concurrency"] == 8
        assert config["providers"]["lastfm_configured"] is True
        assert config["logging"]["level"] == "DEBUG"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = load_config(str(path), settings=_settings())
        assert config["aggregation"] == AGGREGATION_DEFAULTS


class TestDeepMerge:
    def test_nested_merge(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        _deep_merge(base, {"a": {"y": 3}, "c": 4})
        assert base == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
