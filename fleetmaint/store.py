"""Record store owning the reminder and work order collections."""

import datetime
import logging
import re
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from .backend import Backend, PersistenceUnavailable
from .loader import (
    REMINDERS,
    WORK_ORDERS,
    REMINDER_COUNTER,
    WORK_ORDER_COUNTER,
    SLOTS,
    load_seed,
    reminder_from_dict,
    reminder_to_dict,
    validate_state,
    work_order_from_dict,
    work_order_to_dict,
)
from .reminder import Reminder
from .status import Status, WorkOrderStatus
from .work_order import WorkOrder

logger = logging.getLogger(__name__)

T = TypeVar("T", Reminder, WorkOrder)

_ID_NUMBER = re.compile(r"(\d+)$")


def _copy(entity: T) -> T:
    if isinstance(entity, Reminder):
        return replace(entity, vehicles=list(entity.vehicles))
    return replace(entity)


def _index_of(items: Sequence[T], entity_id: str) -> Optional[int]:
    for i, item in enumerate(items):
        if item.id == entity_id:
            return i
    return None


def _max_id_number(items: Sequence[T]) -> int:
    numbers = [int(m.group(1)) for m in (_ID_NUMBER.search(i.id) for i in items) if m]
    return max(numbers, default=0)


class RecordStore:
    """
    Single source of truth for reminders and work orders.

    Every read returns copies; every mutation is written to the backend.
    Backend failures are logged and the store keeps working in memory.
    """

    def __init__(self, backend: Optional[Backend] = None, seed: bool = True):
        self.backend = backend
        self.seed = seed
        self._reminders: List[Reminder] = []
        self._work_orders: List[WorkOrder] = []
        self._reminder_counter = 1
        self._work_order_counter = 0
        self._load()

    # -------------------------------------------------------------------------
    # Durability
    # -------------------------------------------------------------------------

    def _defaults(self) -> Dict[str, Any]:
        """Slot values for a first run."""
        if not self.seed:
            return {
                REMINDERS: [],
                WORK_ORDERS: [],
                REMINDER_COUNTER: 1,
                WORK_ORDER_COUNTER: 0,
            }
        data = load_seed()
        return {slot: data[slot] for slot in SLOTS}

    def _read_backend(self) -> Dict[str, Any]:
        """Stored slots that are present and valid; empty on any failure."""
        if self.backend is None:
            logger.info("No durability backend configured, store is in-memory only")
            return {}
        try:
            stored = {slot: self.backend.load(slot) for slot in SLOTS}
        except PersistenceUnavailable as e:
            logger.warning("Could not load stored data, using defaults: %s", e)
            return {}
        present = {slot: data for slot, data in stored.items() if data is not None}
        errors = validate_state(present)
        if errors:
            logger.warning("Stored data is invalid, using defaults: %s", errors[0])
            return {}
        return present

    def _apply_state(self, state: Dict[str, Any]) -> None:
        reminders = [reminder_from_dict(d) for d in state[REMINDERS]]
        work_orders = [work_order_from_dict(d) for d in state[WORK_ORDERS]]
        self._reminders = reminders
        self._work_orders = work_orders
        # Counters never fall behind issued ids, so ids are never reused
        self._reminder_counter = max(
            int(state[REMINDER_COUNTER]), _max_id_number(reminders) + 1
        )
        self._work_order_counter = max(
            int(state[WORK_ORDER_COUNTER]), _max_id_number(work_orders)
        )

    def _load(self) -> None:
        defaults = self._defaults()
        try:
            self._apply_state({**defaults, **self._read_backend()})
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Stored data could not be parsed, using defaults: %s", e)
            self._apply_state(defaults)
        logger.debug(
            "Loaded %d reminders and %d work orders",
            len(self._reminders),
            len(self._work_orders),
        )

    def snapshot(self) -> Dict[str, Any]:
        """Serialize both collections and both counters, keyed by slot."""
        return {
            REMINDERS: [reminder_to_dict(r) for r in self._reminders],
            WORK_ORDERS: [work_order_to_dict(w) for w in self._work_orders],
            WORK_ORDER_COUNTER: self._work_order_counter,
            REMINDER_COUNTER: self._reminder_counter,
        }

    def _persist(self) -> None:
        if self.backend is None:
            return
        state = self.snapshot()
        try:
            for slot in SLOTS:
                self.backend.save(slot, state[slot])
        except PersistenceUnavailable as e:
            logger.warning("Could not persist store, continuing in memory: %s", e)

    # -------------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------------

    def get_reminders(self) -> List[Reminder]:
        return [_copy(r) for r in self._reminders]

    def get_reminder(self, reminder_id: str) -> Optional[Reminder]:
        idx = _index_of(self._reminders, reminder_id)
        return _copy(self._reminders[idx]) if idx is not None else None

    def add_reminder(self, reminder: Reminder) -> Reminder:
        """Assign the next id (R001, R002, ...), store newest-first and return a copy."""
        reminder_id = f"R{self._reminder_counter:03d}"
        self._reminder_counter += 1
        stored = replace(reminder, id=reminder_id, vehicles=list(reminder.vehicles))
        self._reminders.insert(0, stored)
        self._persist()
        logger.debug("Added reminder %s (%s)", reminder_id, stored.task)
        return _copy(stored)

    def update_reminder(
        self, reminder_id: str, changes: Dict[str, Any]
    ) -> Optional[Reminder]:
        """
        Overwrite the given fields of an existing reminder.

        Status is not recomputed here. Returns None if the id is unknown.
        """
        idx = _index_of(self._reminders, reminder_id)
        if idx is None:
            return None
        changes = {k: v for k, v in changes.items() if k != "id"}
        if "vehicles" in changes:
            changes["vehicles"] = list(changes["vehicles"])
        self._reminders[idx] = replace(self._reminders[idx], **changes)
        self._persist()
        return _copy(self._reminders[idx])

    def delete_reminder(self, reminder_id: str) -> bool:
        """Remove a reminder. Work orders created from it are left as they are."""
        idx = _index_of(self._reminders, reminder_id)
        if idx is None:
            return False
        del self._reminders[idx]
        self._persist()
        logger.debug("Deleted reminder %s", reminder_id)
        return True

    def update_odometer(self, vehicle_id: str, odometer: float) -> bool:
        """
        Apply a telemetry reading to every non-Date reminder on the vehicle.

        Sets `current` and recomputes `status`; `notified` is left alone.
        Returns True if any reminder matched.
        """
        changed = False
        for i, reminder in enumerate(self._reminders):
            if reminder.tracks(vehicle_id):
                self._reminders[i] = replace(reminder, current=odometer).recompute_status()
                changed = True
        if changed:
            self._persist()
        return changed

    def get_unique_vehicles(self) -> List[str]:
        """Every vehicle referenced by any reminder, in first-seen order."""
        seen: Dict[str, None] = {}
        for reminder in self._reminders:
            for vehicle in reminder.vehicles:
                seen.setdefault(vehicle, None)
        return list(seen)

    def get_reminder_stats(self) -> Dict[str, int]:
        return {
            "overdue": sum(1 for r in self._reminders if r.status == Status.OVERDUE),
            "due_soon": sum(1 for r in self._reminders if r.status == Status.DUE_SOON),
            "scheduled": sum(
                1 for r in self._reminders if r.status == Status.SCHEDULED
            ),
        }

    # -------------------------------------------------------------------------
    # Work orders
    # -------------------------------------------------------------------------

    def get_work_orders(self) -> List[WorkOrder]:
        return [_copy(w) for w in self._work_orders]

    def get_work_order(self, work_order_id: str) -> Optional[WorkOrder]:
        idx = _index_of(self._work_orders, work_order_id)
        return _copy(self._work_orders[idx]) if idx is not None else None

    def _next_work_order_id(self) -> str:
        self._work_order_counter += 1
        return f"WO-{self._work_order_counter}"

    def add_work_order(self, work_order: WorkOrder) -> WorkOrder:
        return self.add_work_orders([work_order])[0]

    def add_work_orders(self, work_orders: Sequence[WorkOrder]) -> List[WorkOrder]:
        """
        Store several work orders in one step and persist once.

        Ids are assigned in input order; the last one ends up first in the
        newest-first collection.
        """
        created = [replace(w, id=self._next_work_order_id()) for w in work_orders]
        self._work_orders = list(reversed(created)) + self._work_orders
        self._persist()
        logger.debug("Added work orders %s", ", ".join(w.id for w in created))
        return [_copy(w) for w in created]

    def update_work_order(
        self, work_order_id: str, changes: Dict[str, Any]
    ) -> Optional[WorkOrder]:
        """Overwrite the given fields of a work order. None if the id is unknown."""
        idx = _index_of(self._work_orders, work_order_id)
        if idx is None:
            return None
        changes = {k: v for k, v in changes.items() if k != "id"}
        self._work_orders[idx] = replace(self._work_orders[idx], **changes)
        self._persist()
        return _copy(self._work_orders[idx])

    def delete_work_order(self, work_order_id: str) -> bool:
        idx = _index_of(self._work_orders, work_order_id)
        if idx is None:
            return False
        del self._work_orders[idx]
        self._persist()
        logger.debug("Deleted work order %s", work_order_id)
        return True

    def get_work_order_stats(
        self, today: Optional[datetime.date] = None
    ) -> Dict[str, float]:
        """
        Work order counts plus month-to-date figures.

        The month bucket is matched against the work order's `date`, not its
        completion date. `spend` sums the cost of every work order in the bucket.
        """
        month = (today or datetime.date.today()).strftime("%Y-%m")
        month_to_date = [
            w for w in self._work_orders if w.date and w.date.startswith(month)
        ]
        return {
            "open": sum(
                1 for w in self._work_orders if w.status == WorkOrderStatus.OPEN
            ),
            "in_progress": sum(
                1 for w in self._work_orders if w.status == WorkOrderStatus.IN_PROGRESS
            ),
            "completed": sum(1 for w in month_to_date if w.is_completed),
            "spend": sum(w.cost or 0 for w in month_to_date),
        }
