#!/usr/bin/env python3
"""Tests for validate_store data directory validation."""

from fleetmaint import RecordStore, YamlFileBackend
from fleetmaint.loader import REMINDERS, load_schema
from validate_store import load_slots, main, validate_data_dir


class TestLoadSchema:
    """Tests for load_schema."""

    def test_has_expected_structure(self):
        schema = load_schema()
        assert "reminders" in schema["properties"]
        assert "workOrders" in schema["properties"]


class TestValidateDataDir:
    """Tests for validate_data_dir."""

    def test_store_written_directory_is_valid(self, tmp_path):
        store = RecordStore(YamlFileBackend(tmp_path))
        store.update_odometer("TRK-041", 85000)
        assert validate_data_dir(tmp_path, load_schema()) == []

    def test_empty_directory_is_valid(self, tmp_path):
        assert load_slots(tmp_path) == {}
        assert validate_data_dir(tmp_path, load_schema()) == []

    def test_missing_directory(self, tmp_path):
        errors = validate_data_dir(tmp_path / "nope", load_schema())
        assert len(errors) == 1
        assert errors[0].startswith("Error:")

    def test_bad_yaml(self, tmp_path):
        (tmp_path / f"{REMINDERS}.yaml").write_text("- id: [unclosed\n")
        errors = validate_data_dir(tmp_path, load_schema())
        assert any("YAML parse error" in e for e in errors)

    def test_schema_violation(self, tmp_path):
        (tmp_path / f"{REMINDERS}.yaml").write_text("- id: R001\n  task: Oil Change\n")
        errors = validate_data_dir(tmp_path, load_schema())
        assert any("Schema validation error" in e for e in errors)
        assert any("at path: reminders.0" in e for e in errors)


class TestMain:
    """Tests for the validate_store entry point."""

    def test_ok(self, tmp_path, capsys):
        RecordStore(YamlFileBackend(tmp_path)).update_odometer("TRK-041", 85000)
        assert main([str(tmp_path)]) == 0
        assert "OK:" in capsys.readouterr().out

    def test_fail(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 1
        assert "FAIL:" in capsys.readouterr().out
