"""Unit tests for the Settings root and get_settings."""

import tomllib
from pathlib import Path

import pytest

from harbor.config import get_settings, reload_settings
from harbor.config.settings import (
    Settings,
    current_environment,
    find_config_dir,
    overlay,
    read_layers,
)


class TestSettingsDefaults:
    """Defaults match the parking-reminder deployment."""

    def test_cache_defaults(self) -> None:
        settings = Settings()
        assert settings.cache.prefix == "parking-reminder"
        assert settings.cache.version == "v1"
        assert settings.cache.max_entries == 50
        assert "/" in settings.cache.precache_manifest

    def test_sync_defaults(self) -> None:
        settings = Settings()
        assert settings.sync.tag == "sync-parking-data"
        assert settings.sync.endpoint == "/api/sync"
        assert settings.sync.max_attempts == 3
        assert settings.sync.backoff_base_seconds == 1.0

    def test_fetch_defaults(self) -> None:
        settings = Settings()
        assert settings.fetch.navigation_timeout_ms == 3000
        assert settings.fetch.offline_body == "网络连接失败，请检查您的网络连接"

    def test_notification_defaults(self) -> None:
        notifications = Settings().notifications
        assert notifications.title == "停车提醒"
        assert notifications.vibrate == [500, 200, 500]
        assert [a.action for a in notifications.actions] == ["view", "extend", "dismiss"]

    def test_storage_defaults_to_inmemory(self) -> None:
        assert Settings().storage.backend == "inmemory"

    def test_top_level_fields_are_sections(self, env_override) -> None:
        assert set(Settings.model_fields) == {
            "cache",
            "fetch",
            "sync",
            "notifications",
            "messaging",
            "storage",
            "observability",
        }
        with env_override({"HARBOR_OBSERVABILITY__LOGGING__LEVEL": "DEBUG"}):
            assert Settings().observability.logging.level == "DEBUG"


class TestGetSettings:
    """Tests for TOML loading and env overrides."""

    def test_loads_toml(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "[cache]\nversion = 'v7'\nmax_entries = 5"})
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(test_config_dir))

        settings = get_settings()

        assert settings.cache.version == "v7"
        assert settings.cache.max_entries == 5
        assert settings.cache.prefix == "parking-reminder"

    def test_env_overrides_toml(
        self,
        test_config_dir: Path,
        mock_toml_files,
        env_override,
    ) -> None:
        mock_toml_files({"default.toml": "[sync]\nmax_attempts = 3"})
        with env_override(
            {
                "HARBOR_CONFIG_DIR": str(test_config_dir),
                "HARBOR_SYNC__MAX_ATTEMPTS": "5",
            }
        ):
            settings = get_settings()

        assert settings.sync.max_attempts == 5

    def test_get_settings_is_cached(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "[cache]\nversion = 'v2'"})
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(test_config_dir))

        assert get_settings() is get_settings()

    def test_reload_settings_rereads_files(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "[messaging]\nsettle_delay_ms = 100"})
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(test_config_dir))
        assert get_settings().messaging.settle_delay_ms == 100

        mock_toml_files({"default.toml": "[messaging]\nsettle_delay_ms = 5"})
        assert reload_settings().messaging.settle_delay_ms == 5

    def test_repository_default_config_is_valid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        config_dir = Path(__file__).resolve().parents[3] / "config"
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(config_dir))
        monkeypatch.setenv("HARBOR_ENV", "development")

        settings = get_settings()

        assert settings.observability.logging.format == "console"
        assert settings.messaging.settle_delay_ms == 250
        assert settings.fetch.origin == "http://localhost:8000"

    def test_env_layer_overrides_default_layer(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files(
            {
                "default.toml": "[messaging]\nsettle_delay_ms = 1000\n[cache]\nversion = 'v3'",
                "staging.toml": "[messaging]\nsettle_delay_ms = 10",
            }
        )
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("HARBOR_ENV", "staging")

        settings = get_settings()

        assert settings.messaging.settle_delay_ms == 10
        assert settings.cache.version == "v3"

    def test_plain_settings_ignore_toml(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "[cache]\nversion = 'v9'"})
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(test_config_dir))

        assert Settings().cache.version == "v1"
        assert Settings.load().cache.version == "v9"


class TestOverlay:
    """Tests for layering TOML tables."""

    def test_tables_merge_recursively(self) -> None:
        base = {"cache": {"prefix": "a", "version": "v1"}, "sync": {"tag": "t"}}
        top = {"cache": {"version": "v2", "max_entries": 10}}

        assert overlay(base, top) == {
            "cache": {"prefix": "a", "version": "v2", "max_entries": 10},
            "sync": {"tag": "t"},
        }

    def test_lists_are_replaced(self) -> None:
        base = {"fetch": {"cdn_hosts": ["a.example"]}}
        top = {"fetch": {"cdn_hosts": ["b.example"]}}
        assert overlay(base, top) == {"fetch": {"cdn_hosts": ["b.example"]}}

    def test_base_unmodified(self) -> None:
        base = {"a": {"x": 1}}
        overlay(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}


class TestReadLayers:
    """Tests for locating and reading config layers."""

    def test_environment_layer_is_optional(
        self, test_config_dir: Path, mock_toml_files
    ) -> None:
        mock_toml_files({"default.toml": "[sync]\nmax_attempts = 4"})
        assert read_layers(test_config_dir, "nonexistent") == {"sync": {"max_attempts": 4}}

    def test_missing_default_raises(self, test_config_dir: Path) -> None:
        with pytest.raises(FileNotFoundError, match="default.toml"):
            read_layers(test_config_dir, "development")

    def test_invalid_toml_raises(self, test_config_dir: Path, mock_toml_files) -> None:
        mock_toml_files({"default.toml": "invalid = [unclosed"})
        with pytest.raises(tomllib.TOMLDecodeError):
            read_layers(test_config_dir, "development")

    def test_config_dir_from_env(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(test_config_dir))
        assert find_config_dir() == test_config_dir

    def test_missing_config_dir_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HARBOR_CONFIG_DIR", str(tmp_path / "missing"))
        with pytest.raises(FileNotFoundError):
            find_config_dir()

    def test_config_dir_found_above_start(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("HARBOR_CONFIG_DIR", raising=False)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "default.toml").write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_dir(nested) == (tmp_path / "config").resolve()

    def test_environment_defaults_to_development(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("HARBOR_ENV", raising=False)
        assert current_environment() == "development"
