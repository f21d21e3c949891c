"""Reminder value object for maintenance trigger rules."""

import datetime
from dataclasses import dataclass, replace
from typing import List, Optional

from .calculations import calc_due_date, calc_due_miles, evaluate_status
from .status import Status
from .trigger import Priority, TriggerType


@dataclass
class Reminder:
    """A maintenance rule tied to one or more vehicles."""

    vehicles: List[str]
    task: str
    trigger_type: TriggerType = TriggerType.ODOMETER
    current: float = 0
    target: float = 0
    warn: float = 500
    priority: Priority = Priority.MEDIUM
    status: Status = Status.SCHEDULED
    notified: bool = False
    assignee: str = ""
    notes: str = ""
    make: str = ""
    date: Optional[str] = None
    interval: Optional[float] = None
    id: str = ""

    @property
    def vehicle(self) -> Optional[str]:
        """Primary vehicle (first selected)."""
        return self.vehicles[0] if self.vehicles else None

    def tracks(self, vehicle_id: str) -> bool:
        """True if this reminder follows telemetry for the vehicle."""
        return self.trigger_type.uses_telemetry and vehicle_id in self.vehicles

    def recompute_status(self) -> "Reminder":
        """Copy with status re-derived from the current values (Date keeps its status)."""
        status = evaluate_status(self.trigger_type, self.current, self.target, self.warn)
        return replace(self, status=status or self.status)

    @classmethod
    def create(
        cls,
        vehicles: List[str],
        task: str,
        trigger_type: TriggerType = TriggerType.ODOMETER,
        current: float = 0,
        target: Optional[float] = None,
        warn: float = 500,
        priority: Priority = Priority.MEDIUM,
        interval: Optional[float] = None,
        interval_months: Optional[float] = None,
        date: Optional[str] = None,
        assignee: str = "",
        notes: str = "",
        make: str = "",
        today: Optional[datetime.date] = None,
    ) -> "Reminder":
        """
        Build a new reminder with its target seeded and status derived.

        Interval and Engine Hours reminders given an interval but no target are
        due at current + interval. Date reminders given interval_months but no
        date are due that many months from today. Date reminders always start
        out scheduled.
        """
        if target is None:
            target = calc_due_miles(None, interval, start_miles=current) or 0
        if trigger_type is TriggerType.DATE and date is None:
            due = calc_due_date(today or datetime.date.today(), interval_months)
            date = due.isoformat() if due else None

        reminder = cls(
            vehicles=list(vehicles),
            task=task,
            trigger_type=trigger_type,
            current=current,
            target=target,
            warn=warn,
            priority=priority,
            assignee=assignee,
            notes=notes,
            make=make,
            date=date,
            interval=interval,
        )
        return reminder.recompute_status()
