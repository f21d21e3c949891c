"""Trigger type and priority enums for reminders."""

from enum import Enum


class TriggerType(Enum):
    """Condition category governing how a reminder's status is derived."""

    ODOMETER = "Odometer"
    INTERVAL = "Interval"
    DATE = "Date"
    ENGINE_HOURS = "Engine Hours"

    @classmethod
    def parse(cls, value: str) -> "TriggerType":
        """Parse a persisted value or CLI name ("EngineHours", "engine-hours")."""
        normalized = value.replace("-", "").replace("_", "").replace(" ", "").lower()
        for member in cls:
            if member.value.replace(" ", "").lower() == normalized:
                return member
        raise ValueError(f"Unknown trigger type: {value!r}")

    @property
    def uses_telemetry(self) -> bool:
        return self is not TriggerType.DATE


class Priority(Enum):
    """Reminder priority. Only used to order simultaneously due reminders."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Lower rank = shown first."""
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, value: str) -> "Priority":
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Unknown priority: {value!r}")


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}
