# advisor_booking/tasks/__init__.py
"""
Background work: the in-process reminder scheduler and the optional
Celery worker (``advisor_booking.tasks.celery_app``).

The Celery app is not imported here so the API process never builds it.
"""

from .reminder_scheduler import ReminderScheduler

__all__ = ["ReminderScheduler"]
