# advisor_booking/routes/v1/reminders.py
"""
Reminder scheduler control routes (bearer token required)

Endpoints:
    GET /status - Whether the scheduler is armed and when it next runs
    POST /start - Arm the scheduler (no-op when running)
    POST /stop - Disarm the scheduler (no-op when stopped)
    POST /run - Process all reminders now
"""

import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_admin, get_reminder_scheduler
from ...schemas.base import ApiResponse, ok
from ...schemas.reminders import ReminderRunResult, SchedulerStatus
from ...tasks.reminder_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reminders",
    tags=["reminders"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/status", response_model=ApiResponse[SchedulerStatus])
async def scheduler_status(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> Dict[str, Any]:
    return ok(scheduler.status())


@router.post("/start", response_model=ApiResponse[SchedulerStatus])
async def start_scheduler(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> Dict[str, Any]:
    started = scheduler.start()
    message = "Reminder scheduler started" if started else "Reminder scheduler already running"
    return ok(scheduler.status(), message=message)


@router.post("/stop", response_model=ApiResponse[SchedulerStatus])
async def stop_scheduler(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> Dict[str, Any]:
    stopped = await asyncio.to_thread(scheduler.stop)
    message = "Reminder scheduler stopped" if stopped else "Reminder scheduler already stopped"
    return ok(scheduler.status(), message=message)


@router.post(
    "/run", response_model=ApiResponse[ReminderRunResult], response_model_exclude_none=True
)
async def run_reminders(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> Dict[str, Any]:
    summary = await asyncio.to_thread(scheduler.run_now)
    return ok(summary.to_dict(), message="Reminders processed")
