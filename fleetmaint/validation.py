"""User-facing validation of reminder and work order input."""

from typing import List, Optional, Sequence


def validate_reminder(
    vehicles: Sequence[str],
    task: Optional[str],
    target: Optional[float] = None,
    interval: Optional[float] = None,
    needs_target: bool = True,
) -> List[str]:
    """Check reminder input before it reaches the store. Returns list of messages."""
    errors = []
    if not vehicles or not all(v and v.strip() for v in vehicles):
        errors.append("Please select at least one vehicle")
    if not task or not task.strip():
        errors.append("Please select a task")
    if needs_target and target is None and interval is None:
        errors.append("Please enter a target or an interval")
    if target is not None and target < 0:
        errors.append("Target cannot be negative")
    if interval is not None and interval <= 0:
        errors.append("Interval must be greater than zero")
    return errors


def validate_work_order(vehicle: Optional[str], task: Optional[str]) -> List[str]:
    """Check work order input before it reaches the store. Returns list of messages."""
    errors = []
    if not vehicle or not vehicle.strip():
        errors.append("Please enter a vehicle")
    if not task or not task.strip():
        errors.append("Please enter a task")
    return errors
