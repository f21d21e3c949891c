"""Turning accepted reminders into work orders."""

import datetime
import logging
from dataclasses import replace
from typing import List, Optional

from .calculations import calc_due_miles
from .catalog import VehicleCatalog
from .reminder import Reminder
from .status import Status, WorkOrderStatus
from .store import RecordStore
from .work_order import WorkOrder

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


def format_odometer(value: float) -> str:
    """Odometer display string, e.g. 84312 -> "84,312"."""
    return f"{value:,.0f}"


def accept_and_convert(
    store: RecordStore,
    reminder: Reminder,
    assignee: Optional[str] = None,
    date: Optional[str] = None,
    notes: Optional[str] = None,
    catalog: Optional[VehicleCatalog] = None,
    today: Optional[datetime.date] = None,
) -> List[WorkOrder]:
    """
    Create one Open work order per vehicle on the reminder.

    All work orders are built first and stored in a single step, so either
    every vehicle gets its work order or none does.
    """
    date = date or (today or datetime.date.today()).isoformat()
    notes = notes or f"Auto-created from reminder {reminder.id}"
    drafts = [
        WorkOrder(
            vehicle=vehicle_id,
            make=catalog.make_of(vehicle_id) if catalog else "",
            task=reminder.task,
            status=WorkOrderStatus.OPEN,
            assignee=assignee or UNASSIGNED,
            odo=format_odometer(reminder.current),
            cost=None,
            date=date,
            notes=notes,
            reminder_id=reminder.id,
        )
        for vehicle_id in reminder.vehicles
    ]
    created = store.add_work_orders(drafts)
    logger.info(
        "Reminder %s converted into %s", reminder.id, ", ".join(w.id for w in created)
    )
    return created


def reset_baseline(
    store: RecordStore, reminder_id: str, odometer: float
) -> Optional[Reminder]:
    """
    Restart an interval reminder after its service was done at `odometer`.

    The next target becomes odometer + interval and status is recomputed.
    The notified flag is cleared only when the reminder is no longer overdue.
    Returns None if the reminder no longer exists.
    """
    reminder = store.get_reminder(reminder_id)
    if reminder is None:
        return None

    changes = {}
    target = calc_due_miles(odometer, reminder.interval)
    if target is not None and reminder.trigger_type.uses_telemetry:
        reminder = replace(reminder, current=odometer, target=target).recompute_status()
        changes.update(
            current=reminder.current, target=reminder.target, status=reminder.status
        )
    if reminder.status != Status.OVERDUE:
        changes["notified"] = False
    if not changes:
        return reminder
    return store.update_reminder(reminder_id, changes)
