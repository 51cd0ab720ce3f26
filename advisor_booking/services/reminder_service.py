# advisor_booking/services/reminder_service.py
"""
Reminder Service

Scans for bookings entering a reminder window and notifies each client
once per reminder type.

A booking is due for ``reminder_type`` when it is confirmed, its slot
starts inside the type's window, and no ``sent`` EmailLog row exists for
that (booking, type). Because due-ness is gated on that row, overlapping
scans and restarts never record a second success; a failed attempt is
retried on the next scan while the booking is still in the window.
"""

from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import EmailType
from ..core.exceptions import DomainException, RepositoryException
from ..core.time_window import REMINDER_WINDOWS, Clock, SystemClock
from ..models.booking import Booking
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService
from .notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass
class ReminderBatchResult:
    sent: int = 0
    errors: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"sent": self.sent, "errors": self.errors}
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class ReminderRunSummary:
    ran_at: datetime
    reminder_24h: ReminderBatchResult = field(default_factory=ReminderBatchResult)
    reminder_1h: ReminderBatchResult = field(default_factory=ReminderBatchResult)

    @property
    def total(self) -> ReminderBatchResult:
        batches = {"reminder_24h": self.reminder_24h, "reminder_1h": self.reminder_1h}
        failed_scans = [f"{name}: {batch.error}" for name, batch in batches.items() if batch.error]
        return ReminderBatchResult(
            sent=sum(batch.sent for batch in batches.values()),
            errors=sum(batch.errors for batch in batches.values()),
            error="; ".join(failed_scans) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ran_at": self.ran_at.isoformat(),
            "reminder_24h": self.reminder_24h.to_dict(),
            "reminder_1h": self.reminder_1h.to_dict(),
            "total": self.total.to_dict(),
        }


class ReminderService(BaseService):
    def __init__(self, db: Session, notifier: Notifier, clock: Optional[Clock] = None):
        super().__init__(db)
        self.clock = clock or SystemClock()
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.notification_service = NotificationService(db, notifier, self.clock)

    def find_due_bookings(
        self,
        reminder_type: EmailType,
        now: Optional[datetime] = None,
    ) -> List[Booking]:
        """Confirmed bookings inside the window for ``reminder_type`` with no ``sent`` row yet."""
        window = REMINDER_WINDOWS[reminder_type]
        window_start, window_end = window.bounds(now or self.clock.now())
        try:
            return self.booking_repository.find_due_for_reminder(
                window_start, window_end, reminder_type
            )
        finally:
            self.end_read()

    @BaseService.measure_operation("send_reminders")
    def send_reminders(self, reminder_type: EmailType) -> ReminderBatchResult:
        """
        Notify every due booking for ``reminder_type``.

        One booking failing never stops the batch, and a failed scan is
        reported in the result rather than raised.
        """
        result = ReminderBatchResult()
        try:
            due = self.find_due_bookings(reminder_type)
        except (DomainException, RepositoryException, SQLAlchemyError) as exc:
            logger.error("Reminder scan for %s failed: %s", reminder_type.value, exc)
            self.db.rollback()
            result.error = str(exc)
            return result

        logger.info("Found %d bookings due for %s", len(due), reminder_type.value)
        for booking in due:
            booking_id = booking.id
            try:
                delivered = self.notification_service.dispatch(booking, reminder_type)
            except Exception:
                logger.exception(
                    "Unexpected error sending %s for booking %s", reminder_type.value, booking_id
                )
                self.db.rollback()
                delivered = False
            if delivered:
                result.sent += 1
            else:
                result.errors += 1
        return result

    def send_24h_reminders(self) -> ReminderBatchResult:
        return self.send_reminders(EmailType.REMINDER_24H)

    def send_1h_reminders(self) -> ReminderBatchResult:
        return self.send_reminders(EmailType.REMINDER_1H)

    @BaseService.measure_operation("process_all_reminders")
    def process_all_reminders(self) -> ReminderRunSummary:
        """Run the 24h batch then the 1h batch and aggregate their counts."""
        summary = ReminderRunSummary(ran_at=self.clock.now())
        summary.reminder_24h = self.send_24h_reminders()
        summary.reminder_1h = self.send_1h_reminders()
        total = summary.total
        logger.info("Reminder run finished: %d sent, %d errors", total.sent, total.errors)
        if total.error:
            logger.error("Reminder run had failed scans: %s", total.error)
        return summary
