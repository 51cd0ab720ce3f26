"""Reminder scheduler control schemas."""

from typing import Optional

from .base import StandardizedModel


class SchedulerStatus(StandardizedModel):
    is_running: bool
    next_scheduled_run: Optional[str] = None
    interval_seconds: int
    last_run: Optional[str] = None


class ReminderCounts(StandardizedModel):
    sent: int
    errors: int
    error: Optional[str] = None


class ReminderRunResult(StandardizedModel):
    ran_at: str
    reminder_24h: ReminderCounts
    reminder_1h: ReminderCounts
    total: ReminderCounts
