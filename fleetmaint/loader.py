"""Conversion between stored YAML dicts and reminder/work order objects."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft7Validator

from .reminder import Reminder
from .status import Status, WorkOrderStatus
from .trigger import Priority, TriggerType
from .work_order import WorkOrder

PACKAGE_DIR = Path(__file__).parent
SCHEMA_PATH = PACKAGE_DIR / "schema.yaml"
SEED_PATH = PACKAGE_DIR / "seed.yaml"

# Durability slots, also the top-level keys of the schema
REMINDERS = "reminders"
WORK_ORDERS = "workOrders"
REMINDER_COUNTER = "reminderCounter"
WORK_ORDER_COUNTER = "workOrderCounter"
SLOTS = (REMINDERS, WORK_ORDERS, WORK_ORDER_COUNTER, REMINDER_COUNTER)


def _text(value: Optional[str]) -> str:
    return value if value is not None else ""


def reminder_from_dict(dct: Dict[str, Any]) -> Reminder:
    """Parse a stored reminder. Accepts the legacy single `vehicle` and `type` keys."""
    vehicles = dct.get("vehicles")
    if not vehicles:
        vehicles = [dct["vehicle"]]
    trigger = dct.get("triggerType") or dct.get("type") or TriggerType.ODOMETER.value
    return Reminder(
        id=dct["id"],
        vehicles=list(vehicles),
        task=dct["task"],
        trigger_type=TriggerType.parse(trigger),
        current=dct["current"],
        target=dct["target"],
        warn=dct["warn"],
        priority=Priority.parse(dct.get("priority") or Priority.MEDIUM.value),
        status=Status(dct.get("status") or Status.SCHEDULED.value),
        notified=bool(dct.get("notified", False)),
        assignee=_text(dct.get("assignee")),
        notes=_text(dct.get("notes")),
        make=_text(dct.get("make")),
        date=dct.get("date"),
        interval=dct.get("interval"),
    )


def reminder_to_dict(reminder: Reminder) -> Dict[str, Any]:
    """Serialize a Reminder to the stored dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": reminder.id,
        "vehicles": list(reminder.vehicles),
        "make": reminder.make,
        "task": reminder.task,
        "triggerType": reminder.trigger_type.value,
        "status": reminder.status.value,
        "current": reminder.current,
        "target": reminder.target,
        "warn": reminder.warn,
        "priority": reminder.priority.value,
        "notified": reminder.notified,
        "assignee": reminder.assignee,
        "notes": reminder.notes,
    }
    if reminder.date is not None:
        d["date"] = reminder.date
    if reminder.interval is not None:
        d["interval"] = reminder.interval
    return d


def work_order_from_dict(dct: Dict[str, Any]) -> WorkOrder:
    """Parse a stored work order."""
    odo = dct.get("odo")
    if isinstance(odo, (int, float)):
        odo = f"{odo:,.0f}"
    return WorkOrder(
        id=dct["id"],
        vehicle=dct["vehicle"],
        task=dct["task"],
        status=WorkOrderStatus(dct["status"]),
        make=_text(dct.get("make")),
        assignee=_text(dct.get("assignee")),
        odo=_text(odo),
        cost=dct.get("cost"),
        date=dct.get("date"),
        notes=_text(dct.get("notes")),
        parts=_text(dct.get("parts")),
        labor=_text(dct.get("labor")),
        completion_date=dct.get("completionDate"),
        reminder_id=dct.get("reminderId"),
    )


def work_order_to_dict(work_order: WorkOrder) -> Dict[str, Any]:
    """Serialize a WorkOrder to the stored dict format (camelCase keys)."""
    return {
        "id": work_order.id,
        "vehicle": work_order.vehicle,
        "make": work_order.make,
        "task": work_order.task,
        "status": work_order.status.value,
        "assignee": work_order.assignee,
        "odo": work_order.odo,
        "cost": work_order.cost,
        "date": work_order.date,
        "notes": work_order.notes,
        "parts": work_order.parts,
        "labor": work_order.labor,
        "completionDate": work_order.completion_date,
        "reminderId": work_order.reminder_id,
    }


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def validate_state(state: Dict[str, Any], schema: Optional[dict] = None) -> List[str]:
    """Validate persisted slot data against the schema. Returns list of errors."""
    if not isinstance(state, dict):
        return ["Schema validation error: state must be a mapping"]
    validator = Draft7Validator(schema or load_schema())
    errors = []
    found = sorted(validator.iter_errors(state), key=lambda e: [str(p) for p in e.path])
    for error in found:
        errors.append(f"Schema validation error: {error.message}")
        if error.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in error.path)}")
    return errors


def load_seed() -> Dict[str, Any]:
    """Load the first-run seed data (reminders, work orders, counters, known vehicles)."""
    with open(SEED_PATH) as f:
        return yaml.safe_load(f)
