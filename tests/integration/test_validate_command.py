"""Integration tests for the validate CLI command.

These tests verify the validate command works correctly end-to-end,
including:
- Valid layout files pass validation
- Structural errors produce exit code 1
- Advisory findings produce exit code 2
- Load errors are reported with their JSON path
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from ledwall.cli.main import app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "layouts"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_layout(self, runner: CliRunner) -> None:
        """A clean layout passes with exit code 0."""
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "valid_grid.json")])

        assert result.exit_code == 0
        assert "Validation passed. Layout is valid." in result.output

    def test_layout_with_errors(self, runner: CliRunner) -> None:
        """Duplicate ids, overlaps and unknown types fail with exit code 1."""
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "with_errors.json")])

        assert result.exit_code == 1
        assert "[DUPLICATE_ID]" in result.output
        assert "[MISSING_TYPE]" in result.output
        assert "[OVERLAP]" in result.output
        assert "Validation failed" in result.output

    def test_layout_with_warnings(self, runner: CliRunner) -> None:
        """Off-grid and isolated cabinets are warnings with exit code 2."""
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "with_warnings.json")])

        assert result.exit_code == 2
        assert "Warnings:" in result.output
        assert "[OUT_OF_GRID]" in result.output
        assert "[ISOLATED_CABINET]" in result.output
        assert "Validation passed with" in result.output

    def test_file_not_found(self, runner: CliRunner) -> None:
        """Non-existent file should fail with exit code 1."""
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "nonexistent.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json_syntax(self, runner: CliRunner) -> None:
        """Invalid JSON should fail with exit code 1."""
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "invalid_json.json")])

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output
        assert "Loading failed." in result.output

    def test_unknown_field_rejected(self, runner: CliRunner) -> None:
        """Unknown fields are reported with their JSON path."""
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "unknown_field.json")])

        assert result.exit_code == 1
        assert "cabinets[0].colour" in result.output

    def test_bad_rotation_rejected(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "bad_rotation.json")])

        assert result.exit_code == 1
        assert "cabinets[0].rotation" in result.output

    def test_unsupported_version_rejected(self, runner: CliRunner, tmp_path: Path) -> None:
        """Version problems name the field and the supported versions."""
        layout_file = tmp_path / "future.json"
        layout_file.write_text('{"schema_version": "9.0"}')
        result = runner.invoke(app, ["validate", str(layout_file)])

        assert result.exit_code == 1
        assert "schema_version: unsupported" in result.output
        assert "Loading failed." in result.output
