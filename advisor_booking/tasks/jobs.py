# advisor_booking/tasks/jobs.py
"""
Units of background work shared by the in-process scheduler and Celery.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..core.time_window import Clock
from ..services.email import EmailService
from ..services.notification_service import NotificationService
from ..services.notifier import Notifier
from ..services.reminder_service import ReminderRunSummary, ReminderService

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def run_reminder_cycle(
    session_factory: SessionFactory,
    notifier: Optional[Notifier] = None,
    clock: Optional[Clock] = None,
) -> ReminderRunSummary:
    """Process all reminder types with a fresh session."""
    db = session_factory()
    try:
        service = ReminderService(db, notifier or EmailService(), clock)
        return service.process_all_reminders()
    finally:
        db.close()


def send_confirmation_email(
    session_factory: SessionFactory,
    booking_id: int,
    notifier: Optional[Notifier] = None,
) -> bool:
    """
    Fire-and-forget confirmation for a freshly created booking.

    Runs after the booking transaction committed; any failure is logged and
    recorded, never raised back to the request that created the booking.
    """
    db = session_factory()
    try:
        return NotificationService(db, notifier or EmailService()).send_confirmation(booking_id)
    except Exception:
        logger.exception("Confirmation email for booking %s could not be processed", booking_id)
        db.rollback()
        return False
    finally:
        db.close()
