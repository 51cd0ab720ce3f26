# advisor_booking/tasks/reminders.py
"""
Reminder Celery tasks.
"""

import logging
from typing import Any, Dict

from ..database import SessionLocal
from .celery_app import BaseTask, celery_app
from .jobs import run_reminder_cycle, send_confirmation_email

logger = logging.getLogger(__name__)


@celery_app.task(base=BaseTask, name="advisor_booking.tasks.reminders.process_all_reminders")
def process_all_reminders() -> Dict[str, Any]:
    """Scan both reminder windows and send what is due."""
    summary = run_reminder_cycle(SessionLocal)
    return summary.to_dict()


@celery_app.task(base=BaseTask, name="advisor_booking.tasks.reminders.send_confirmation")
def send_confirmation(booking_id: int) -> Dict[str, Any]:
    delivered = send_confirmation_email(SessionLocal, booking_id)
    return {"booking_id": booking_id, "delivered": delivered}
