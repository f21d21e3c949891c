"""WorkOrder value object for maintenance work records."""

from dataclasses import dataclass
from typing import Optional

from .status import WorkOrderStatus


@dataclass
class WorkOrder:
    """Maintenance work performed or scheduled for one vehicle."""

    vehicle: str
    task: str
    status: WorkOrderStatus = WorkOrderStatus.OPEN
    make: str = ""
    assignee: str = ""
    odo: str = ""
    cost: Optional[float] = None
    date: Optional[str] = None
    notes: str = ""
    parts: str = ""
    labor: str = ""
    completion_date: Optional[str] = None
    reminder_id: Optional[str] = None
    id: str = ""

    @property
    def is_completed(self) -> bool:
        return self.status is WorkOrderStatus.COMPLETED
