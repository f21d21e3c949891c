"""Shared fixtures for the fleet maintenance tests."""

import pytest

from fleetmaint import MemoryBackend, Priority, RecordStore, Reminder, TriggerType


@pytest.fixture
def store():
    """Empty store with an in-memory backend (no seed data)."""
    return RecordStore(MemoryBackend(), seed=False)


@pytest.fixture
def make_reminder():
    """Build an odometer reminder with sensible defaults."""

    def _make(
        vehicles=("TRK-041",),
        task="Oil Change",
        current=80000,
        target=84000,
        warn=500,
        priority=Priority.MEDIUM,
        trigger_type=TriggerType.ODOMETER,
        **kwargs,
    ):
        return Reminder.create(
            vehicles=list(vehicles),
            task=task,
            trigger_type=trigger_type,
            current=current,
            target=target,
            warn=warn,
            priority=priority,
            **kwargs,
        )

    return _make
