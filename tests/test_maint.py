#!/usr/bin/env python3
"""Tests for maint CLI formatting, table helpers and commands."""

import argparse

import pytest

from fleetmaint import RecordStore, Reminder, TriggerType, WorkOrder, YamlFileBackend
from maint import (
    REMINDER_HEADERS,
    WORK_ORDER_HEADERS,
    format_cost,
    format_miles,
    format_remaining,
    main,
    make_reminder_table,
    make_work_order_table,
    parse_reading,
    truncate,
)


class TestFormatMiles:
    """Tests for format_miles."""

    def test_formats_number(self):
        assert format_miles(50000) == "50,000"
        assert format_miles(0) == "0"

    def test_none_returns_dash(self):
        assert format_miles(None) == "-"


class TestFormatCost:
    """Tests for format_cost."""

    def test_formats_number(self):
        assert format_cost(75.50) == "$75.50"
        assert format_cost(0) == "$0.00"

    def test_none_returns_dash(self):
        assert format_cost(None) == "-"


class TestFormatRemaining:
    """Tests for format_remaining."""

    def test_positive_remaining(self):
        reminder = Reminder(vehicles=["TRK-041"], task="Oil", current=81500, target=84000)
        assert format_remaining(reminder) == "2,500"

    def test_negative_remaining_overdue(self):
        reminder = Reminder(vehicles=["TRK-041"], task="Oil", current=84312, target=84000)
        assert format_remaining(reminder) == "-312"

    def test_date_reminder_shows_date(self):
        reminder = Reminder(
            vehicles=["TRK-022"],
            task="Brakes",
            trigger_type=TriggerType.DATE,
            date="2026-03-15",
        )
        assert format_remaining(reminder) == "2026-03-15"


class TestTruncate:
    """Tests for truncate."""

    def test_none_returns_dash(self):
        assert truncate(None) == "-"
        assert truncate("") == "-"

    def test_short_text_unchanged(self):
        assert truncate("short") == "short"

    def test_long_text_truncated(self):
        result = truncate("a" * 40, max_len=10)
        assert result == "aaaaaaa..."
        assert len(result) == 10


class TestParseReading:
    """Tests for parse_reading."""

    def test_valid(self):
        assert parse_reading("TRK-041=85000") == ("TRK-041", 85000.0)

    def test_missing_separator(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_reading("TRK-041")

    def test_bad_number(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_reading("TRK-041=lots")


class TestTables:
    """Tests for the table row builders."""

    def test_reminder_row(self):
        reminder = Reminder(
            id="R001",
            vehicles=["VAN-012", "VAN-031"],
            task="Air Filter",
            current=44850,
            target=45000,
            notified=True,
        )
        (row,) = make_reminder_table([reminder])
        assert len(row) == len(REMINDER_HEADERS)
        assert row[0] == "R001"
        assert row[1] == "VAN-012, VAN-031"
        assert row[-1] == "yes"

    def test_work_order_row(self):
        work_order = WorkOrder(
            id="WO-2021", vehicle="TRK-041", task="Oil Change", cost=89.5, odo="84,100"
        )
        (row,) = make_work_order_table([work_order])
        assert len(row) == len(WORK_ORDER_HEADERS)
        assert row[3] == "Open"
        assert row[5] == "84,100"
        assert row[6] == "$89.50"
        assert row[8] == "-"


@pytest.fixture
def run(tmp_path, monkeypatch, capsys):
    """Run the CLI against a fresh seeded data directory; returns (code, stdout)."""
    for name in ("SEED", "DATA_DIR", "POLL_INTERVAL", "FETCH_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(f"FLEETMAINT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)

    def _run(*argv):
        code = main(["--data-dir", str(tmp_path), *argv])
        return code, capsys.readouterr().out

    return _run


class TestCommands:
    """End-to-end tests of the CLI commands."""

    def test_stats(self, run):
        code, out = run("stats")
        assert code == 0
        assert "Overdue reminders" in out
        assert "Spend this month" in out

    def test_reminders_filtered(self, run):
        code, out = run("reminders", "--status", "overdue")
        assert code == 0
        assert "R001" in out
        assert "R006" in out
        assert "R002" not in out

    def test_add_reminder_requires_vehicle(self, run):
        code, out = run("add-reminder", "--task", "Oil Change", "--target", "1000")
        assert code == 1
        assert "Please select at least one vehicle" in out

    def test_add_reminder(self, run):
        code, out = run(
            "add-reminder",
            "--vehicle", "BUS-007",
            "--task", "Oil Change",
            "--current", "12000",
            "--target", "11000",
        )
        assert code == 0
        assert "Reminder R007 saved (overdue)." in out

    def test_check_reports_each_episode_once(self, run):
        _, out = run("check")
        assert "TRIGGERED: Oil Change - TRK-041" in out
        _, out = run("check")
        assert "TRIGGERED: Transmission Fluid - TRK-041" in out
        _, out = run("check")
        assert "No newly overdue reminders." in out

    def test_accept_creates_work_order(self, run):
        code, out = run("accept", "R001", "--assignee", "Shop A")
        assert code == 0
        assert "Work Order WO-2025 created" in out
        _, out = run("work-orders", "--status", "Open")
        assert "WO-2025" in out
        assert "R001" in out

    def test_accept_unknown_reminder(self, run):
        code, out = run("accept", "R404")
        assert code == 1
        assert "Error" in out

    def test_complete_resets_source_reminder(self, run):
        run("accept", "R002")
        code, out = run("complete", "WO-2025", "--cost", "42", "--odo", "45100")
        assert code == 0
        assert "Work order WO-2025 completed." in out
        assert "next due at" in out

    def test_poll(self, run):
        code, out = run("poll", "--reading", "TRK-041=85000")
        assert code == 0
        assert "TRK-041: 85,000" in out
        assert "Reminders updated." in out

    def test_update_odometer_unknown_vehicle(self, run):
        code, out = run("update-odometer", "XYZ-1", "100")
        assert code == 0
        assert "No odometer-based reminders for XYZ-1." in out

    def test_invalid_settings(self, run, monkeypatch):
        monkeypatch.setenv("FLEETMAINT_FETCH_TIMEOUT", "-1")
        code, out = run("stats")
        assert code == 1
        assert "Error: invalid FLEETMAINT_* settings" in out

    def test_complete_does_not_repeat_overdue_notification(self, run):
        _, out = run("check")
        assert "TRIGGERED: Oil Change - TRK-041" in out
        run("accept", "R001")
        _, out = run("complete", "WO-2025", "--odo", "84400")
        assert "Reminder R001 is still overdue" in out
        _, out = run("check")
        assert "TRIGGERED: Transmission Fluid - TRK-041" in out
        _, out = run("check")
        assert "No newly overdue reminders." in out

    def test_edit_reminder_vehicle_updates_make(self, run, tmp_path):
        code, out = run("edit-reminder", "R001", "--vehicle", "FLT-088")
        assert code == 0
        reminder = RecordStore(YamlFileBackend(tmp_path)).get_reminder("R001")
        assert reminder.vehicles == ["FLT-088"]
        assert reminder.make == "2023 Chevy Silverado"

        run("edit-reminder", "R001", "--vehicle", "XYZ-1")
        assert RecordStore(YamlFileBackend(tmp_path)).get_reminder("R001").make == ""
