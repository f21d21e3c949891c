#!/usr/bin/env python3
"""
Unified CLI for fleet maintenance reminders and work orders.

Commands:
  reminders          - List reminders with their status
  add-reminder       - Create a reminder for one or more vehicles
  edit-reminder      - Change fields of a reminder (status is recomputed)
  delete-reminder    - Delete a reminder
  work-orders        - List work orders
  add-work-order     - Create a work order by hand
  update-work-order  - Change fields or status of a work order
  complete           - Mark a work order completed (restarts its reminder)
  delete-work-order  - Delete a work order
  stats              - Reminder and work order summary
  update-odometer    - Apply one odometer reading and check for triggers
  poll               - Run one telemetry cycle with the given readings
  check              - Report the most urgent newly overdue reminder
  accept             - Turn a reminder into work orders (one per vehicle)
"""

import argparse
import asyncio
import sys
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional, Tuple

from pydantic import ValidationError

from fleetmaint import (
    Priority,
    RecordStore,
    Reminder,
    Settings,
    StaticTelemetrySource,
    Status,
    TelemetryAdapter,
    TriggerPipeline,
    TriggerType,
    VehicleCatalog,
    WorkOrder,
    WorkOrderStatus,
    YamlFileBackend,
    accept_and_convert,
    configure_logging,
    meters_to_miles,
    reset_baseline,
    validate_reminder,
    validate_work_order,
)
from fleetmaint.conversion import format_odometer
from fleetmaint.notifications import Notification

# =============================================================================
# Formatting helpers
# =============================================================================


def format_miles(miles: Optional[float]) -> str:
    """Format mileage for display."""
    return f"{miles:,.0f}" if miles is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_remaining(reminder: Reminder) -> str:
    """Distance to target, negative once past it. Date reminders show their date."""
    if reminder.trigger_type is TriggerType.DATE:
        return reminder.date or "-"
    remaining = reminder.target - reminder.current
    if remaining < 0:
        return f"-{abs(remaining):,.0f}"
    return f"{remaining:,.0f}"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def print_errors(errors: List[str]) -> int:
    for error in errors:
        print(f"Error: {error}")
    return 1


def print_notification(notification: Optional[Notification]) -> None:
    if notification is None:
        return
    reminder = notification.reminder
    print(f"TRIGGERED: {reminder.task} - {notification.vehicles_label}")
    print(f"  Reminder: {reminder.id} ({reminder.priority.value} priority)")
    print(f"  Over target by: {format_miles(notification.over_amount)}")
    print(f"  Accept with: accept {reminder.id}")


def parse_reading(text: str) -> Tuple[str, float]:
    """Parse a VEHICLE=ODOMETER argument."""
    vehicle, sep, value = text.partition("=")
    if not sep or not vehicle:
        raise argparse.ArgumentTypeError(f"expected VEHICLE=ODOMETER, got {text!r}")
    try:
        return vehicle, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid odometer value in {text!r}")


# =============================================================================
# Tables
# =============================================================================


def make_reminder_table(reminders: List[Reminder]) -> List[List[str]]:
    """Convert reminders to table rows."""
    rows = []
    for r in reminders:
        rows.append(
            [
                r.id,
                ", ".join(r.vehicles),
                r.task,
                r.trigger_type.value,
                format_miles(r.current),
                format_miles(r.target) if r.trigger_type is not TriggerType.DATE else "-",
                format_remaining(r),
                r.status.value,
                r.priority.value,
                "yes" if r.notified else "",
            ]
        )
    return rows


def make_work_order_table(work_orders: List[WorkOrder]) -> List[List[str]]:
    """Convert work orders to table rows."""
    rows = []
    for w in work_orders:
        rows.append(
            [
                w.id,
                w.vehicle,
                w.task,
                w.status.value,
                w.assignee or "-",
                w.odo or "-",
                format_cost(w.cost),
                w.date or "-",
                w.reminder_id or "-",
                truncate(w.notes),
            ]
        )
    return rows


REMINDER_HEADERS = [
    "ID",
    "Vehicles",
    "Task",
    "Trigger",
    "Current",
    "Target",
    "Remaining",
    "Status",
    "Priority",
    "Notified",
]

WORK_ORDER_HEADERS = [
    "ID",
    "Vehicle",
    "Task",
    "Status",
    "Assignee",
    "Odometer",
    "Cost",
    "Date",
    "Reminder",
    "Notes",
]


# =============================================================================
# Reminder commands
# =============================================================================


def cmd_reminders(args, store: RecordStore) -> int:
    """List reminders, optionally filtered."""
    reminders = store.get_reminders()
    if args.status:
        reminders = [r for r in reminders if r.status.value == args.status]
    if args.vehicle:
        reminders = [r for r in reminders if args.vehicle in r.vehicles]
    if args.query:
        q = args.query.lower()
        reminders = [
            r
            for r in reminders
            if q in r.task.lower() or any(q in v.lower() for v in r.vehicles)
        ]

    if not reminders:
        print("No reminders found.")
        return 0

    print(tabulate(make_reminder_table(reminders), headers=REMINDER_HEADERS))
    return 0


def cmd_add_reminder(args, store: RecordStore) -> int:
    """Create a reminder."""
    trigger_type = TriggerType.parse(args.type)
    errors = validate_reminder(
        args.vehicle,
        args.task,
        target=args.target,
        interval=args.interval,
        needs_target=trigger_type is not TriggerType.DATE,
    )
    if trigger_type is TriggerType.DATE and not (args.date or args.interval_months):
        errors.append("Please enter a due date or an interval in months")
    if errors:
        return print_errors(errors)

    catalog = VehicleCatalog.known_vehicles()
    reminder = Reminder.create(
        vehicles=args.vehicle,
        task=args.task.strip(),
        trigger_type=trigger_type,
        current=args.current,
        target=args.target,
        warn=args.warn,
        priority=Priority.parse(args.priority),
        interval=args.interval,
        interval_months=args.interval_months,
        date=args.date,
        assignee=args.assignee or "",
        notes=args.notes or "",
        make=catalog.make_of(args.vehicle[0]),
    )
    stored = store.add_reminder(reminder)
    print(f"Reminder {stored.id} saved ({stored.status.value}).")
    return 0


def cmd_edit_reminder(args, store: RecordStore) -> int:
    """Change reminder fields and recompute its status."""
    reminder = store.get_reminder(args.reminder_id)
    if reminder is None:
        print(f"Error: Unknown reminder '{args.reminder_id}'")
        return 1

    changes = {}
    for name in ("task", "current", "target", "warn", "date", "assignee", "notes"):
        value = getattr(args, name)
        if value is not None:
            changes[name] = value
    if args.vehicle:
        changes["vehicles"] = args.vehicle
        changes["make"] = VehicleCatalog.known_vehicles().make_of(args.vehicle[0])
    if args.priority:
        changes["priority"] = Priority.parse(args.priority)
    if args.rearm:
        changes["notified"] = False

    errors = validate_reminder(
        changes.get("vehicles", reminder.vehicles),
        changes.get("task", reminder.task),
        needs_target=False,
    )
    if errors:
        return print_errors(errors)

    updated = store.update_reminder(args.reminder_id, changes)
    recomputed = updated.recompute_status()
    if recomputed.status != updated.status:
        updated = store.update_reminder(args.reminder_id, {"status": recomputed.status})
    print(f"Reminder {updated.id} updated ({updated.status.value}).")
    return 0


def cmd_delete_reminder(args, store: RecordStore) -> int:
    if not store.delete_reminder(args.reminder_id):
        print(f"Error: Unknown reminder '{args.reminder_id}'")
        return 1
    print(f"Reminder {args.reminder_id} deleted.")
    return 0


# =============================================================================
# Work order commands
# =============================================================================


def cmd_work_orders(args, store: RecordStore) -> int:
    """List work orders."""
    work_orders = store.get_work_orders()
    if args.status:
        work_orders = [w for w in work_orders if w.status.value == args.status]
    if args.vehicle:
        work_orders = [w for w in work_orders if w.vehicle == args.vehicle]

    if not work_orders:
        print("No work orders found.")
        return 0

    print(tabulate(make_work_order_table(work_orders), headers=WORK_ORDER_HEADERS))
    return 0


def cmd_add_work_order(args, store: RecordStore) -> int:
    """Create a work order by hand."""
    errors = validate_work_order(args.vehicle, args.task)
    if errors:
        return print_errors(errors)

    catalog = VehicleCatalog.known_vehicles()
    work_order = store.add_work_order(
        WorkOrder(
            vehicle=args.vehicle,
            make=args.make or catalog.make_of(args.vehicle),
            task=args.task,
            assignee=args.assignee or "Unassigned",
            odo=format_odometer(args.odo) if args.odo is not None else "",
            cost=args.cost,
            date=args.date,
            notes=args.notes or "",
            parts=args.parts or "",
            labor=args.labor or "",
        )
    )
    print(f"Work order {work_order.id} created.")
    return 0


def cmd_update_work_order(args, store: RecordStore) -> int:
    """Change work order fields."""
    changes = {}
    for name in ("assignee", "cost", "notes", "parts", "labor", "completion_date"):
        value = getattr(args, name)
        if value is not None:
            changes[name] = value
    if args.odo is not None:
        changes["odo"] = format_odometer(args.odo)
    if args.status:
        changes["status"] = WorkOrderStatus(args.status)

    updated = store.update_work_order(args.work_order_id, changes)
    if updated is None:
        print(f"Error: Unknown work order '{args.work_order_id}'")
        return 1
    print(f"Work order {updated.id} updated ({updated.status.value}).")
    return 0


def cmd_complete(args, store: RecordStore) -> int:
    """Mark a work order completed and restart the reminder it came from."""
    changes = {"status": WorkOrderStatus.COMPLETED}
    if args.cost is not None:
        changes["cost"] = args.cost
    if args.completion_date:
        changes["completion_date"] = args.completion_date
    if args.odo is not None:
        changes["odo"] = format_odometer(args.odo)

    updated = store.update_work_order(args.work_order_id, changes)
    if updated is None:
        print(f"Error: Unknown work order '{args.work_order_id}'")
        return 1
    print(f"Work order {updated.id} completed.")

    if updated.reminder_id and args.odo is not None:
        reminder = reset_baseline(store, updated.reminder_id, args.odo)
        if reminder is not None and reminder.status == Status.OVERDUE:
            print(
                f"Reminder {reminder.id} is still overdue "
                f"(target {format_miles(reminder.target)})."
            )
        elif reminder is not None:
            print(
                f"Reminder {reminder.id} restarted: next due at "
                f"{format_miles(reminder.target)} ({reminder.status.value})."
            )
    return 0


def cmd_delete_work_order(args, store: RecordStore) -> int:
    if not store.delete_work_order(args.work_order_id):
        print(f"Error: Unknown work order '{args.work_order_id}'")
        return 1
    print(f"Work order {args.work_order_id} deleted.")
    return 0


# =============================================================================
# Stats, telemetry and triggers
# =============================================================================


def cmd_stats(args, store: RecordStore) -> int:
    """Reminder and work order summary."""
    reminder_stats = store.get_reminder_stats()
    wo_stats = store.get_work_order_stats()

    rows = [
        ["Overdue reminders", reminder_stats["overdue"]],
        ["Due soon", reminder_stats["due_soon"]],
        ["Scheduled", reminder_stats["scheduled"]],
        ["Vehicles tracked", len(store.get_unique_vehicles())],
        ["Open work orders", wo_stats["open"]],
        ["In progress", wo_stats["in_progress"]],
        ["Completed this month", wo_stats["completed"]],
        ["Spend this month", format_cost(wo_stats["spend"])],
    ]
    print(tabulate(rows, tablefmt="simple"))
    return 0


def cmd_update_odometer(args, store: RecordStore) -> int:
    """Apply one odometer reading, then check for triggers."""
    if not store.update_odometer(args.vehicle, args.odometer):
        print(f"No odometer-based reminders for {args.vehicle}.")
    else:
        print(f"Odometer for {args.vehicle} set to {format_miles(args.odometer)}.")
    print_notification(TriggerPipeline(store, surface=lambda n: None).check_triggered())
    return 0


def cmd_poll(args, store: RecordStore) -> int:
    """Run one telemetry cycle against the given readings."""
    readings = {}
    for vehicle, value in args.reading or []:
        readings[vehicle] = meters_to_miles(value) if args.meters else value

    adapter = TelemetryAdapter(
        store,
        TriggerPipeline(store, surface=lambda n: None),
        StaticTelemetrySource(readings),
        timeout=args.settings.fetch_timeout,
    )
    result = asyncio.run(adapter.poll_once())

    for reading in result.readings:
        print(f"{reading.vehicle_id}: {format_miles(reading.odometer)}")
    if result.failed:
        print(f"No reading for: {', '.join(result.failed)}")
    print("Reminders updated." if result.changed else "No reminders changed.")
    print_notification(result.notification)
    return 0


def cmd_check(args, store: RecordStore) -> int:
    notification = TriggerPipeline(store, surface=lambda n: None).check_triggered()
    if notification is None:
        print("No newly overdue reminders.")
    print_notification(notification)
    return 0


def cmd_accept(args, store: RecordStore) -> int:
    """Convert a reminder into work orders."""
    reminder = store.get_reminder(args.reminder_id)
    if reminder is None:
        print(f"Error: Unknown reminder '{args.reminder_id}'")
        return 1

    created = accept_and_convert(
        store,
        reminder,
        assignee=args.assignee,
        date=args.date,
        notes=args.notes,
        catalog=VehicleCatalog.known_vehicles(),
    )
    if len(created) == 1:
        print(f"Work Order {created[0].id} created")
    else:
        print(f"{len(created)} Work Orders created: {', '.join(w.id for w in created)}")
    return 0


COMMANDS = {
    "reminders": cmd_reminders,
    "add-reminder": cmd_add_reminder,
    "edit-reminder": cmd_edit_reminder,
    "delete-reminder": cmd_delete_reminder,
    "work-orders": cmd_work_orders,
    "add-work-order": cmd_add_work_order,
    "update-work-order": cmd_update_work_order,
    "complete": cmd_complete,
    "delete-work-order": cmd_delete_work_order,
    "stats": cmd_stats,
    "update-odometer": cmd_update_odometer,
    "poll": cmd_poll,
    "check": cmd_check,
    "accept": cmd_accept,
}


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet maintenance reminders and work orders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s reminders --status overdue
  %(prog)s add-reminder --vehicle TRK-041 --task "Oil Change" \\
      --type odometer --current 84000 --target 87000 --warn 500
  %(prog)s add-reminder --vehicle VAN-012 --vehicle VAN-031 \\
      --task "Air Filter" --type interval --current 44000 --interval 15000
  %(prog)s update-odometer TRK-041 87100
  %(prog)s poll --reading TRK-041=87100 --reading VAN-012=45200
  %(prog)s accept R007 --assignee "Shop A"
  %(prog)s complete WO-2025 --cost 89.50 --odo 87150
  %(prog)s stats
""",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the store's YAML files (default: $FLEETMAINT_DATA_DIR or ./data)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Reminders
    reminders_parser = subparsers.add_parser("reminders", help="List reminders")
    reminders_parser.add_argument(
        "--status", choices=[s.value for s in Status], help="Only this status"
    )
    reminders_parser.add_argument("--vehicle", type=str, help="Only this vehicle")
    reminders_parser.add_argument(
        "--query", type=str, help="Text to match in task or vehicle (case-insensitive)"
    )

    add_parser = subparsers.add_parser("add-reminder", help="Create a reminder")
    add_parser.add_argument(
        "--vehicle",
        action="append",
        default=[],
        help="Vehicle id (repeat for multi-vehicle reminders)",
    )
    add_parser.add_argument("--task", type=str, help="Maintenance task, e.g. 'Oil Change'")
    add_parser.add_argument(
        "--type",
        default="odometer",
        choices=["odometer", "interval", "date", "engine-hours"],
        help="Trigger type (default: odometer)",
    )
    add_parser.add_argument("--current", type=float, default=0, help="Current reading")
    add_parser.add_argument("--target", type=float, help="Reading at which service is due")
    add_parser.add_argument(
        "--warn", type=float, default=500, help="Due-soon distance before target (default: 500)"
    )
    add_parser.add_argument(
        "--interval", type=float, help="Service interval; target = current + interval"
    )
    add_parser.add_argument(
        "--interval-months", type=float, help="Date trigger: due this many months from today"
    )
    add_parser.add_argument("--date", type=str, help="Date trigger: due date (YYYY-MM-DD)")
    add_parser.add_argument(
        "--priority", default="Medium", choices=[p.value for p in Priority]
    )
    add_parser.add_argument("--assignee", type=str)
    add_parser.add_argument("--notes", type=str)

    edit_parser = subparsers.add_parser("edit-reminder", help="Change a reminder")
    edit_parser.add_argument("reminder_id", type=str)
    edit_parser.add_argument("--vehicle", action="append", help="Replace the vehicle list")
    edit_parser.add_argument("--task", type=str)
    edit_parser.add_argument("--current", type=float)
    edit_parser.add_argument("--target", type=float)
    edit_parser.add_argument("--warn", type=float)
    edit_parser.add_argument("--date", type=str)
    edit_parser.add_argument("--priority", choices=[p.value for p in Priority])
    edit_parser.add_argument("--assignee", type=str)
    edit_parser.add_argument("--notes", type=str)
    edit_parser.add_argument(
        "--rearm", action="store_true", help="Clear the notified flag"
    )

    delete_parser = subparsers.add_parser("delete-reminder", help="Delete a reminder")
    delete_parser.add_argument("reminder_id", type=str)

    # Work orders
    wo_parser = subparsers.add_parser("work-orders", help="List work orders")
    wo_parser.add_argument(
        "--status", choices=[s.value for s in WorkOrderStatus], help="Only this status"
    )
    wo_parser.add_argument("--vehicle", type=str, help="Only this vehicle")

    add_wo_parser = subparsers.add_parser("add-work-order", help="Create a work order")
    add_wo_parser.add_argument("--vehicle", type=str)
    add_wo_parser.add_argument("--task", type=str)
    add_wo_parser.add_argument("--make", type=str)
    add_wo_parser.add_argument("--assignee", type=str)
    add_wo_parser.add_argument("--odo", type=float, help="Odometer at service")
    add_wo_parser.add_argument("--date", type=str, help="Scheduled date (YYYY-MM-DD)")
    add_wo_parser.add_argument("--cost", type=float)
    add_wo_parser.add_argument("--notes", type=str)
    add_wo_parser.add_argument("--parts", type=str)
    add_wo_parser.add_argument("--labor", type=str)

    update_wo_parser = subparsers.add_parser(
        "update-work-order", help="Change a work order"
    )
    update_wo_parser.add_argument("work_order_id", type=str)
    update_wo_parser.add_argument("--status", choices=[s.value for s in WorkOrderStatus])
    update_wo_parser.add_argument("--assignee", type=str)
    update_wo_parser.add_argument("--odo", type=float)
    update_wo_parser.add_argument("--cost", type=float)
    update_wo_parser.add_argument("--notes", type=str)
    update_wo_parser.add_argument("--parts", type=str)
    update_wo_parser.add_argument("--labor", type=str)
    update_wo_parser.add_argument("--completion-date", type=str)

    complete_parser = subparsers.add_parser(
        "complete", help="Mark a work order completed"
    )
    complete_parser.add_argument("work_order_id", type=str)
    complete_parser.add_argument("--cost", type=float)
    complete_parser.add_argument("--completion-date", type=str)
    complete_parser.add_argument(
        "--odo", type=float, help="Odometer at service; restarts the source reminder"
    )

    delete_wo_parser = subparsers.add_parser(
        "delete-work-order", help="Delete a work order"
    )
    delete_wo_parser.add_argument("work_order_id", type=str)

    # Stats, telemetry, triggers
    subparsers.add_parser("stats", help="Reminder and work order summary")

    odo_parser = subparsers.add_parser(
        "update-odometer", help="Apply an odometer reading"
    )
    odo_parser.add_argument("vehicle", type=str)
    odo_parser.add_argument("odometer", type=float)

    poll_parser = subparsers.add_parser("poll", help="Run one telemetry cycle")
    poll_parser.add_argument(
        "--reading",
        action="append",
        type=parse_reading,
        help="VEHICLE=ODOMETER (repeatable)",
    )
    poll_parser.add_argument(
        "--meters", action="store_true", help="Readings are raw meters, convert to miles"
    )

    subparsers.add_parser("check", help="Report the most urgent new trigger")

    accept_parser = subparsers.add_parser(
        "accept", help="Create work orders from a reminder"
    )
    accept_parser.add_argument("reminder_id", type=str)
    accept_parser.add_argument("--assignee", type=str)
    accept_parser.add_argument("--date", type=str, help="Scheduled date (default: today)")
    accept_parser.add_argument("--notes", type=str)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as e:
        print(f"Error: invalid FLEETMAINT_* settings\n{e}")
        return 1
    configure_logging(settings.log_level)
    args.settings = settings

    data_dir = args.data_dir or settings.data_dir
    store = RecordStore(YamlFileBackend(data_dir), seed=settings.seed)

    return COMMANDS[args.command](args, store)


if __name__ == "__main__":
    sys.exit(main() or 0)
