"""Status evaluation and target seeding helpers for reminders."""

from datetime import date
from dateutil.relativedelta import relativedelta
from typing import Iterable, List, Optional, TYPE_CHECKING

from .status import Status
from .trigger import TriggerType

if TYPE_CHECKING:
    from .reminder import Reminder


def calc_due_miles(
    last_miles: Optional[float], interval: Optional[float], start_miles: float = 0
) -> Optional[float]:
    """
    Calculate the next due reading (miles or engine hours).

    - After a service: last_miles + interval
    - Never serviced: start_miles + interval (the reading when the reminder was set up)
    """
    if interval is None:
        return None
    if last_miles is not None:
        return last_miles + interval
    return start_miles + interval


def calc_due_date(
    last_date: Optional[date], interval_months: Optional[float]
) -> Optional[date]:
    """Calculate next due date: last + interval months."""
    if interval_months is None or last_date is None:
        return None
    months = int(interval_months)
    days = int((interval_months - months) * 30)
    return last_date + relativedelta(months=months, days=days)


def check_status(current: float, due: float, soon_threshold: float) -> Status:
    """Determine status by comparing current value to due threshold."""
    if current >= due:
        return Status.OVERDUE
    if 0 <= due - current <= soon_threshold:
        return Status.DUE_SOON
    return Status.SCHEDULED


def evaluate_status(
    trigger_type: TriggerType, current: float, target: float, warn: float
) -> Optional[Status]:
    """
    Compute a reminder's status from its trigger and latest reading.

    Odometer, Interval and Engine Hours share one numeric rule. Date reminders
    return None: their status is set by whoever creates or edits them.
    """
    if not trigger_type.uses_telemetry:
        return None
    return check_status(current, target, warn)


def over_amount(reminder: "Reminder") -> float:
    """How far past the target the reminder is (negative while still ahead)."""
    return reminder.current - reminder.target


def priority_sorted(reminders: Iterable["Reminder"]) -> List["Reminder"]:
    """Order reminders High -> Medium -> Low, keeping input order within a priority."""
    return sorted(reminders, key=lambda r: r.priority.rank)
