"""Detection of newly overdue reminders and their one-time notification."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .calculations import over_amount, priority_sorted
from .reminder import Reminder
from .status import Status
from .store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A reminder that just went overdue, and by how much."""

    reminder: Reminder
    over_amount: float

    @property
    def vehicles_label(self) -> str:
        return ", ".join(self.reminder.vehicles)


NotificationSurface = Callable[[Notification], None]


def log_notification(notification: Notification) -> None:
    """Default surface: report the trigger through logging."""
    reminder = notification.reminder
    logger.warning(
        "Maintenance reminder triggered: %s on %s (%s), %s past target",
        reminder.task,
        notification.vehicles_label,
        reminder.id,
        f"{notification.over_amount:,.0f}",
    )


class TriggerPipeline:
    """Raises at most one notification per overdue episode."""

    def __init__(
        self, store: RecordStore, surface: Optional[NotificationSurface] = None
    ):
        self.store = store
        self.surface = surface or log_notification

    def pending(self):
        """Overdue reminders not yet notified, most urgent first."""
        return priority_sorted(
            r
            for r in self.store.get_reminders()
            if r.status == Status.OVERDUE and not r.notified
        )

    def check_triggered(self) -> Optional[Notification]:
        """
        Notify about the single most urgent overdue, unnotified reminder.

        The reminder is marked notified right away, so polling again before
        anything changes raises nothing.
        """
        pending = self.pending()
        if not pending:
            return None

        reminder = pending[0]
        notification = Notification(reminder, over_amount(reminder))
        try:
            self.surface(notification)
        except Exception:
            logger.exception("Notification surface failed for reminder %s", reminder.id)
        self.store.update_reminder(reminder.id, {"notified": True})
        return notification
