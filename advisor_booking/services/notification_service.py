# advisor_booking/services/notification_service.py
"""
Notification Service

Builds booking emails, dispatches them through a ``Notifier`` and records
the outcome in the EmailLog audit trail.

Dispatch always happens with no transaction open: the message context is
copied out of the ORM objects, the read transaction is closed, the network
call is made, and only then is a short transaction opened to append the
``sent`` / ``failed`` row.
"""

from datetime import datetime
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.enums import EmailStatus, EmailType
from ..core.exceptions import NotificationFailure
from ..core.time_window import Clock, SystemClock, to_timezone
from ..models.booking import Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notifier import NotificationResult, Notifier

logger = logging.getLogger(__name__)

MAX_ERROR_MESSAGE_LENGTH = 1000

SUBJECTS = {
    EmailType.CONFIRMATION: "Confirmación de cita - {advisor_name}",
    EmailType.REMINDER_24H: "Recordatorio de cita - {advisor_name}",
    EmailType.REMINDER_1H: "Recordatorio de cita - {advisor_name}",
}

TEMPLATES = {
    EmailType.CONFIRMATION: "email/confirmation.html",
    EmailType.REMINDER_24H: "email/reminder.html",
    EmailType.REMINDER_1H: "email/reminder.html",
}

LEAD_TIME_LABELS = {
    EmailType.REMINDER_24H: "24 horas",
    EmailType.REMINDER_1H: "1 hora",
}


def build_message_context(booking: Booking, email_type: EmailType) -> Dict[str, Any]:
    """Copy everything a message needs out of a loaded booking (slot and advisor included)."""
    advisor = booking.advisor
    slot = booking.slot
    tz_name = advisor.timezone or "UTC"
    local_start = to_timezone(slot.start_utc, tz_name)
    local_end = to_timezone(slot.end_utc, tz_name)
    return {
        "booking_id": booking.id,
        "client_name": booking.client_name,
        "client_email": booking.client_email,
        "advisor_name": advisor.name,
        "timezone": tz_name,
        "start_local": local_start,
        "end_local": local_end,
        "appointment_date": local_start.strftime("%d/%m/%Y"),
        "appointment_time": f"{local_start:%H:%M} - {local_end:%H:%M}",
        "lead_time": LEAD_TIME_LABELS.get(email_type),
    }


class NotificationService(BaseService):
    def __init__(self, db: Session, notifier: Notifier, clock: Optional[Clock] = None):
        super().__init__(db)
        self.notifier = notifier
        self.clock = clock or SystemClock()
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.email_log_repository = RepositoryFactory.create_email_log_repository(db)

    @BaseService.measure_operation("send_confirmation")
    def send_confirmation(self, booking_id: int) -> bool:
        """
        Best-effort confirmation email for ``booking_id``.

        Returns whether delivery succeeded; never raises for delivery problems.
        """
        booking = self.booking_repository.get_with_details(booking_id)
        if booking is None:
            self.end_read()
            logger.warning("Confirmation skipped: booking %s no longer exists", booking_id)
            return False
        return self.dispatch(booking, EmailType.CONFIRMATION)

    @BaseService.measure_operation("send_reminder")
    def send_reminder(self, booking_id: int, reminder_type: EmailType) -> bool:
        """Send one reminder outside a batch run. Only reminder types are accepted."""
        if reminder_type not in EmailType.reminders():
            raise ValueError(f"{reminder_type} is not a reminder type")
        booking = self.booking_repository.get_with_details(booking_id)
        if booking is None:
            self.end_read()
            logger.warning("Reminder skipped: booking %s no longer exists", booking_id)
            return False
        return self.dispatch(booking, reminder_type)

    def dispatch(self, booking: Booking, email_type: EmailType) -> bool:
        """
        Send ``email_type`` for an already-loaded booking and record the outcome.

        Delivery failures (failed result or ``NotificationFailure``) are
        logged and recorded as a ``failed`` row.
        """
        booking_id = booking.id
        recipient = booking.client_email
        context = build_message_context(booking, email_type)
        subject = SUBJECTS[email_type].format(advisor_name=context["advisor_name"])
        self.end_read()

        try:
            result = self.notifier.send(recipient, subject, TEMPLATES[email_type], context)
        except NotificationFailure as exc:
            result = NotificationResult.failed(str(exc) or type(exc).__name__)

        if not result.success:
            logger.warning(
                "%s email for booking %s failed: %s", email_type.value, booking_id, result.error
            )
        prometheus_metrics.record_notification(
            email_type.value, "sent" if result.success else "failed"
        )
        return self.record_outcome(booking_id, email_type, result)

    def record_outcome(
        self, booking_id: int, email_type: EmailType, result: NotificationResult
    ) -> bool:
        """
        Append the delivery outcome to the audit trail.

        A reminder is recorded as ``sent`` at most once per booking: the
        booking row is locked and an existing ``sent`` row wins.
        """
        now: datetime = self.clock.now()
        with self.transaction():
            if not result.success:
                self.email_log_repository.record(
                    booking_id,
                    email_type,
                    EmailStatus.FAILED,
                    attempts=1,
                    error_message=(result.error or "unknown error")[:MAX_ERROR_MESSAGE_LENGTH],
                )
                return False

            if email_type in EmailType.reminders():
                self.booking_repository.get_for_update(booking_id)
                if self.email_log_repository.has_sent(booking_id, email_type):
                    logger.warning(
                        "%s for booking %s was already recorded as sent; skipping duplicate",
                        email_type.value,
                        booking_id,
                    )
                    return True

            self.email_log_repository.record(
                booking_id, email_type, EmailStatus.SENT, attempts=1, sent_at=now
            )
            return True
