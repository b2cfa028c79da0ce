"""Unit tests for settings, catalogs and the JSON loader."""

import json
from pathlib import Path

import pytest

from specfields.application import (
    ConfigError,
    RegistrySettings,
    SanitySettings,
    load_catalog,
    load_catalog_from_dict,
    load_settings,
    load_settings_from_dict,
)
from specfields.application.loader import format_json_path


class TestSettings:
    """Tests for RegistrySettings and SanitySettings."""

    def test_defaults(self) -> None:
        settings = RegistrySettings()

        assert settings.cache_ttl_seconds == 300
        assert settings.max_conditional_depth == 5
        assert settings.max_fields_per_category == 100
        assert settings.enable_real_time_updates is True

    def test_load_without_path_returns_defaults(self) -> None:
        assert load_settings(None) == RegistrySettings()

    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(
            json.dumps({"cache_ttl_seconds": 60, "sanity": {"project_id": "abc"}})
        )

        settings = load_settings(path)

        assert settings.cache_ttl_seconds == 60
        assert settings.sanity.project_id == "abc"

    def test_unknown_setting_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_settings_from_dict({"cache_ttl": 60})

        assert exc_info.value.error_type == "validation"
        assert exc_info.value.details[0]["path"] == "cache_ttl"

    def test_non_positive_ttl_rejected(self) -> None:
        with pytest.raises(ConfigError):
            load_settings_from_dict({"cache_ttl_seconds": 0})

    def test_sanity_urls(self) -> None:
        settings = SanitySettings(project_id="abc", api_version="2024-01-01", token=None)

        assert settings.base_url == "https://abc.api.sanity.io/v2024-01-01"
        cdn = settings.model_copy(update={"use_cdn": True})
        assert cdn.base_url == "https://abc.apicdn.sanity.io/v2024-01-01"

    def test_token_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SANITY_API_TOKEN", "secret")

        assert SanitySettings().token == "secret"


class TestLoader:
    """Tests for JSON loading errors."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_catalog(tmp_path / "missing.json")

        assert exc_info.value.error_type == "file_not_found"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text('{"fields": [}')

        with pytest.raises(ConfigError) as exc_info:
            load_catalog(path)

        assert exc_info.value.error_type == "json_parse"
        assert exc_info.value.details[0]["line"] == 1

    def test_validation_error_paths(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_catalog_from_dict(
                {"fields": [{"id": "f1", "key": "watts", "label": "Watts", "type": "dial"}]}
            )

        assert exc_info.value.details[0]["path"] == "fields[0].type"
        assert "fields[0].type" in exc_info.value.message

    def test_format_json_path(self) -> None:
        assert format_json_path(("fields", 0, "key")) == "fields[0].key"
        assert format_json_path((0,)) == "[0]"


class TestCatalog:
    def test_catalog_fixture_loads(self) -> None:
        path = Path(__file__).parent.parent / "fixtures" / "catalog.json"

        catalog = load_catalog(path)

        assert len(catalog.fields) == 6
        assert catalog.category_mappings[0].required_field_keys == ["amperage", "voltage"]
