# advisor_booking/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta
from functools import partial
import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from .api.dependencies import get_db
from .core.config import settings
from .core.constants import API_VERSION, SERVICE_NAME
from .core.logging_config import configure_logging
from .database import SessionLocal, ping
from .errors import register_error_handlers
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import admin as admin_v1, auth as auth_v1, bookings as bookings_v1
from .routes.v1 import reminders as reminders_v1
from .tasks.jobs import run_reminder_cycle
from .tasks.reminder_scheduler import ReminderScheduler

configure_logging(settings.log_level, structured=settings.log_json)

logger = logging.getLogger(__name__)


def build_reminder_scheduler() -> ReminderScheduler:
    return ReminderScheduler(
        partial(run_reminder_cycle, SessionLocal),
        interval=timedelta(minutes=settings.reminder_interval_minutes),
    )


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info("%s starting up (environment: %s)", SERVICE_NAME, settings.environment)

    scheduler = build_reminder_scheduler()
    app.state.reminder_scheduler = scheduler
    if settings.reminder_scheduler_enabled and not settings.is_testing:
        scheduler.start()
    else:
        logger.info("Reminder scheduler not started automatically")

    yield

    logger.info("%s shutting down", SERVICE_NAME)
    if scheduler.is_running:
        scheduler.stop()


app = FastAPI(
    title=SERVICE_NAME,
    description="Appointment booking with financial advisors",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(bookings_v1.router)
app.include_router(admin_v1.router)
app.include_router(auth_v1.router)
app.include_router(reminders_v1.router)


@app.get("/")
def root() -> Dict[str, Any]:
    return {"success": True, "message": f"{SERVICE_NAME} is running", "version": API_VERSION}


@app.get("/health")
def health_check(response: Response, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Liveness plus a database round trip."""
    try:
        ping(db)
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        db.rollback()
        response.status_code = HTTP_503_SERVICE_UNAVAILABLE
        return {"success": False, "status": "unhealthy", "database": "unreachable"}
    return {"success": True, "status": "healthy", "database": "ok", "version": API_VERSION}


@app.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
