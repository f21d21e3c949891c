"""
Fleet maintenance reminder tracking.

This package provides the reminder lifecycle engine:
- Status / WorkOrderStatus: Urgency and work order progress
- TriggerType / Priority: How a reminder is evaluated and ordered
- Reminder / WorkOrder: Value objects held by the store
- RecordStore: Owner of both collections, with durable backends
- TriggerPipeline: One notification per overdue episode
- TelemetryAdapter / TelemetryPoller: Odometer ingestion
- accept_and_convert: Reminder -> per-vehicle work orders
"""

from .status import Status, WorkOrderStatus
from .trigger import TriggerType, Priority
from .reminder import Reminder
from .work_order import WorkOrder
from .calculations import (
    calc_due_miles,
    calc_due_date,
    check_status,
    evaluate_status,
    over_amount,
    priority_sorted,
)
from .backend import Backend, MemoryBackend, YamlFileBackend, PersistenceUnavailable
from .store import RecordStore
from .catalog import VehicleCatalog, VehicleInfo
from .notifications import Notification, TriggerPipeline, log_notification
from .telemetry import (
    OdometerReading,
    PollResult,
    StaticTelemetrySource,
    TelemetryAdapter,
    TelemetryPoller,
    TelemetrySource,
    meters_to_miles,
)
from .conversion import accept_and_convert, reset_baseline
from .validation import validate_reminder, validate_work_order
from .config import Settings, configure_logging

__all__ = [
    "Status",
    "WorkOrderStatus",
    "TriggerType",
    "Priority",
    "Reminder",
    "WorkOrder",
    "calc_due_miles",
    "calc_due_date",
    "check_status",
    "evaluate_status",
    "over_amount",
    "priority_sorted",
    "Backend",
    "MemoryBackend",
    "YamlFileBackend",
    "PersistenceUnavailable",
    "RecordStore",
    "VehicleCatalog",
    "VehicleInfo",
    "Notification",
    "TriggerPipeline",
    "log_notification",
    "OdometerReading",
    "PollResult",
    "StaticTelemetrySource",
    "TelemetryAdapter",
    "TelemetryPoller",
    "TelemetrySource",
    "meters_to_miles",
    "accept_and_convert",
    "reset_baseline",
    "validate_reminder",
    "validate_work_order",
    "Settings",
    "configure_logging",
]
