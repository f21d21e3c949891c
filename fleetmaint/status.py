"""Status enums for reminders and work orders."""

from enum import Enum


class Status(Enum):
    """Reminder urgency categories."""

    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    SCHEDULED = "scheduled"


class WorkOrderStatus(Enum):
    """Work order progress. Normal flow is Open -> In Progress -> Completed."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
