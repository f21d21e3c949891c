#!/usr/bin/env python3
"""Tests for durability backends."""

import pytest

from fleetmaint import MemoryBackend, PersistenceUnavailable, YamlFileBackend


class TestMemoryBackend:
    """Tests for MemoryBackend."""

    def test_missing_slot_is_none(self):
        assert MemoryBackend().load("reminders") is None

    def test_save_then_load(self):
        backend = MemoryBackend()
        backend.save("reminderCounter", 7)
        assert backend.load("reminderCounter") == 7

    def test_initial_slots(self):
        backend = MemoryBackend({"workOrderCounter": 2024})
        assert backend.load("workOrderCounter") == 2024

    def test_stored_value_is_independent(self):
        backend = MemoryBackend()
        data = [{"id": "R001"}]
        backend.save("reminders", data)
        data[0]["id"] = "R999"
        assert backend.load("reminders") == [{"id": "R001"}]

    def test_corrupt_slot_raises(self):
        backend = MemoryBackend()
        backend.slots["reminders"] = "[unclosed"
        with pytest.raises(PersistenceUnavailable):
            backend.load("reminders")


class TestYamlFileBackend:
    """Tests for YamlFileBackend."""

    def test_writes_one_file_per_slot(self, tmp_path):
        backend = YamlFileBackend(tmp_path / "data")
        backend.save("reminders", [{"id": "R001", "task": "Oil Change"}])
        backend.save("reminderCounter", 2)
        assert (tmp_path / "data" / "reminders.yaml").exists()
        assert backend.load("reminders") == [{"id": "R001", "task": "Oil Change"}]
        assert backend.load("reminderCounter") == 2

    def test_missing_file_is_none(self, tmp_path):
        assert YamlFileBackend(tmp_path).load("workOrders") is None

    def test_invalid_yaml_raises(self, tmp_path):
        (tmp_path / "reminders.yaml").write_text("- id: [unclosed\n")
        with pytest.raises(PersistenceUnavailable):
            YamlFileBackend(tmp_path).load("reminders")

    def test_unwritable_directory_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(PersistenceUnavailable):
            YamlFileBackend(blocker).save("reminders", [])
