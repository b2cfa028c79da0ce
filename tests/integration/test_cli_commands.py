"""Integration tests for the specfields CLI.

These tests run the commands end-to-end against catalog fixtures:
- validate exit codes (0 valid, 1 errors, 2 warnings)
- schema output as store-shaped JSON
- legacy migrate and classify output
- loading errors for missing or malformed files
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specfields.cli.main import app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"
CATALOG = str(FIXTURES_PATH / "catalog.json")

pytestmark = pytest.mark.integration


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def broken_catalog(tmp_path: Path) -> Path:
    """The fixture catalog plus a multiselect field without options."""
    catalog = json.loads((FIXTURES_PATH / "catalog.json").read_text())
    catalog["fields"].append(
        {
            "id": "field-broken",
            "key": "broken",
            "label": "Broken",
            "type": "multiselect",
            "categories": ["lights"],
        }
    )
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog))
    return path


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_values(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", CATALOG, "switches", str(FIXTURES_PATH / "valid_values.json")]
        )

        assert result.exit_code == 0
        assert "Validation passed." in result.output

    def test_invalid_values(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", CATALOG, "switches", str(FIXTURES_PATH / "invalid_values.json")]
        )

        assert result.exit_code == 1
        assert "amperage: Amperage must be one of: 6A, 16A" in result.output
        assert "voltage: Voltage must be a valid number" in result.output
        assert "Validation failed: 2 error(s)" in result.output

    def test_values_with_warnings(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", CATALOG, "switches", str(FIXTURES_PATH / "warning_values.json")]
        )

        assert result.exit_code == 2
        assert "Warnings:" in result.output
        assert "High wattage detected (1500W)" in result.output

    def test_mapping_makes_field_required(self, runner: CliRunner, tmp_path: Path) -> None:
        """voltage is optional on the field but required by the switches mapping."""
        values = tmp_path / "values.json"
        values.write_text(json.dumps({"amperage": "6A"}))

        result = runner.invoke(app, ["validate", CATALOG, "switches", str(values)])

        assert result.exit_code == 1
        assert "voltage: Voltage is required" in result.output

    def test_rejected_catalog_field_is_reported(
        self, runner: CliRunner, broken_catalog: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "validate",
                str(broken_catalog),
                "switches",
                str(FIXTURES_PATH / "valid_values.json"),
            ],
        )

        assert result.exit_code == 0

        assert "skipped field 'broken'" in result.output

    def test_unknown_category(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", CATALOG, "fans", str(FIXTURES_PATH / "valid_values.json")]
        )

        assert result.exit_code == 1
        assert "Category 'fans' has no fields" in result.output

    def test_catalog_not_found(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            [
                "validate",
                str(FIXTURES_PATH / "missing.json"),
                "switches",
                str(FIXTURES_PATH / "valid_values.json"),
            ],
        )

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_values_not_json(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", CATALOG, "switches", str(FIXTURES_PATH / "broken.json")]
        )

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output

    def test_settings_file(
        self, runner: CliRunner, tmp_path: Path, broken_catalog: Path
    ) -> None:
        """A settings file that disables checks lets the broken field load."""
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"validate_on_load": False}))

        result = runner.invoke(
            app,
            [
                "--settings",
                str(settings),
                "validate",
                str(broken_catalog),
                "switches",
                str(FIXTURES_PATH / "valid_values.json"),
            ],
        )

        assert result.exit_code == 0
        assert "skipped field" not in result.output

    def test_invalid_settings_file(self, runner: CliRunner, tmp_path: Path) -> None:
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"cache_ttl_seconds": -1}))

        result = runner.invoke(
            app,
            [
                "-s",
                str(settings),
                "validate",
                CATALOG,
                "switches",
                str(FIXTURES_PATH / "valid_values.json"),
            ],
        )

        assert result.exit_code == 1
        assert "cache_ttl_seconds" in result.output


class TestSchemaCommand:
    """Tests for the schema command."""

    def test_required_fields_only(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["schema", CATALOG, "switches"])

        assert result.exit_code == 0
        schema = json.loads(result.output)
        assert schema["categoryId"] == "switches"
        assert [f["key"] for f in schema["fields"]] == ["amperage"]

    def test_optional_and_exclude(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["schema", CATALOG, "switches", "--optional", "-x", "color", "-x", "watts"]
        )

        assert result.exit_code == 0
        schema = json.loads(result.output)
        assert [f["key"] for f in schema["fields"]] == ["amperage", "voltage"]
        assert schema["validationRules"]["voltage"] == {"min": 110.0, "max": 440.0}


class TestLegacyCommands:
    """Tests for migrate and classify."""

    def test_migrate(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["migrate", CATALOG, "switches", str(FIXTURES_PATH / "legacy_values.json")]
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "amperage": "16A",
            "voltage": 230,
            "watts": 60,
            "notes": "kept",
        }

    def test_classify(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["classify", CATALOG, "lights"])

        assert result.exit_code == 0
        assert "Category: lights" in result.output
        assert "Type: light" in result.output
        assert "Required: lightType" in result.output
        assert "Optional: lumens" in result.output

    def test_classify_unknown_category(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["classify", CATALOG, "fans"])

        assert result.exit_code == 0
        assert "Type: general" in result.output
        assert "Required: -" in result.output
