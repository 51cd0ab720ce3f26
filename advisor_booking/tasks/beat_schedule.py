# advisor_booking/tasks/beat_schedule.py
"""Celery Beat schedule for periodic reminder processing."""

from datetime import timedelta
from typing import Any, Dict, Union

from celery.schedules import crontab

from ..core.constants import DEFAULT_REMINDER_INTERVAL_MINUTES, REMINDER_TASK_QUEUE


def _schedule_for(interval_minutes: int) -> Union[crontab, timedelta]:
    # crontab minute steps only make sense below one hour
    if interval_minutes < 60:
        return crontab(minute=f"*/{interval_minutes}")
    return timedelta(minutes=interval_minutes)


def get_beat_schedule(interval_minutes: int = DEFAULT_REMINDER_INTERVAL_MINUTES) -> Dict[str, Any]:
    if interval_minutes < 1:
        raise ValueError("interval_minutes must be at least 1")
    return {
        "process-booking-reminders": {
            "task": "advisor_booking.tasks.reminders.process_all_reminders",
            "schedule": _schedule_for(interval_minutes),
            "options": {"queue": REMINDER_TASK_QUEUE, "expires": interval_minutes * 60},
        },
    }
