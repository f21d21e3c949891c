#!/usr/bin/env python3
"""Tests for the Reminder value object."""
from datetime import date

from fleetmaint import Priority, Reminder, Status, TriggerType


class TestReminderCreate:
    """Tests for Reminder.create seeding and status derivation."""

    def test_odometer_status_derived(self):
        r = Reminder.create(["TRK-041"], "Oil Change", current=84000, target=84000, warn=500)
        assert r.status == Status.OVERDUE
        assert r.notified is False
        assert r.id == ""

    def test_interval_target_seeded_from_current(self):
        r = Reminder.create(
            ["VAN-012"],
            "Air Filter",
            trigger_type=TriggerType.INTERVAL,
            current=44000,
            interval=15000,
        )
        assert r.target == 59000
        assert r.interval == 15000
        assert r.status == Status.SCHEDULED

    def test_engine_hours_due_soon(self):
        r = Reminder.create(
            ["TRK-099"],
            "Hydraulic Service",
            trigger_type=TriggerType.ENGINE_HOURS,
            current=950,
            target=1000,
            warn=100,
        )
        assert r.status == Status.DUE_SOON

    def test_explicit_target_wins_over_interval(self):
        r = Reminder.create(["A"], "Task", current=100, target=500, interval=1000)
        assert r.target == 500

    def test_date_reminder_starts_scheduled(self):
        r = Reminder.create(
            ["TRK-022"],
            "Brake Inspection",
            trigger_type=TriggerType.DATE,
            current=90000,
            target=0,
            date="2020-01-01",
        )
        assert r.status == Status.SCHEDULED
        assert r.date == "2020-01-01"

    def test_date_seeded_from_interval_months(self):
        r = Reminder.create(
            ["TRK-022"],
            "DOT Inspection",
            trigger_type=TriggerType.DATE,
            interval_months=12,
            today=date(2026, 3, 15),
        )
        assert r.date == "2027-03-15"

    def test_vehicle_list_is_copied(self):
        vehicles = ["A", "B"]
        r = Reminder.create(vehicles, "Task", target=100)
        vehicles.append("C")
        assert r.vehicles == ["A", "B"]


class TestReminderHelpers:
    """Tests for vehicle, tracks and recompute_status."""

    def test_primary_vehicle(self):
        r = Reminder(vehicles=["VAN-012", "VAN-031"], task="Air Filter")
        assert r.vehicle == "VAN-012"

    def test_tracks_any_listed_vehicle(self):
        r = Reminder(vehicles=["VAN-012", "VAN-031"], task="Air Filter")
        assert r.tracks("VAN-031")
        assert not r.tracks("TRK-041")

    def test_date_reminder_tracks_nothing(self):
        r = Reminder(vehicles=["TRK-022"], task="Brakes", trigger_type=TriggerType.DATE)
        assert not r.tracks("TRK-022")

    def test_recompute_returns_copy(self):
        r = Reminder(vehicles=["A"], task="Oil", current=100, target=100, warn=10)
        recomputed = r.recompute_status()
        assert recomputed.status == Status.OVERDUE
        assert r.status == Status.SCHEDULED

    def test_recompute_keeps_date_status(self):
        r = Reminder(
            vehicles=["A"],
            task="Inspection",
            trigger_type=TriggerType.DATE,
            current=100,
            target=0,
            status=Status.DUE_SOON,
            priority=Priority.HIGH,
        )
        assert r.recompute_status().status == Status.DUE_SOON
