# advisor_booking/tasks/celery_app.py
"""
Celery application for running reminders outside the API process.

Broker and result backend are Redis. Use this instead of the in-process
scheduler by setting REMINDER_SCHEDULER_ENABLED=false on the API and
running ``celery -A advisor_booking.tasks.celery_app worker -B -Q celery,notifications``.

Reminder tasks are routed to the ``notifications`` queue. Both queues are
declared in ``task_queues``, so a worker started without ``-Q`` consumes
them too.
"""

import logging
from typing import Any

from celery import Celery, Task
from celery.signals import setup_logging
from kombu import Exchange, Queue

from ..core.config import settings
from ..core.constants import DEFAULT_TASK_QUEUE, REMINDER_TASK_QUEUE
from ..core.logging_config import configure_logging
from .beat_schedule import get_beat_schedule

logger = logging.getLogger(__name__)

TASK_QUEUES = (
    Queue(DEFAULT_TASK_QUEUE, Exchange(DEFAULT_TASK_QUEUE), routing_key=DEFAULT_TASK_QUEUE),
    Queue(REMINDER_TASK_QUEUE, Exchange(REMINDER_TASK_QUEUE), routing_key=REMINDER_TASK_QUEUE),
)


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Celery: Configured Celery application instance
    """
    app = Celery("advisor_booking", broker=settings.redis_url, backend=settings.redis_url)
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        worker_prefetch_multiplier=1,
        task_soft_time_limit=240,
        task_time_limit=300,
        task_acks_late=True,
        worker_hijack_root_logger=False,
        imports=("advisor_booking.tasks.reminders",),
        task_default_queue=DEFAULT_TASK_QUEUE,
        task_queues=TASK_QUEUES,
        task_routes={"advisor_booking.tasks.reminders.*": {"queue": REMINDER_TASK_QUEUE}},
    )
    app.conf.beat_schedule = get_beat_schedule(settings.reminder_interval_minutes)
    return app


@setup_logging.connect  # type: ignore[misc]
def config_loggers(*args: Any, **kwargs: Any) -> None:
    """Use the application's logging setup instead of Celery's."""
    configure_logging(settings.log_level, settings.log_json)


celery_app = create_celery_app()


class BaseTask(Task):  # type: ignore[misc]
    """Base task that logs failures with task context."""

    def on_failure(self, exc: Exception, task_id: str, args: Any, kwargs: Any, einfo: Any) -> None:
        logger.error(
            "Task %s[%s] failed with exception: %s",
            self.name,
            task_id,
            exc,
            exc_info=True,
            extra={"task_id": task_id, "task_name": self.name},
        )
