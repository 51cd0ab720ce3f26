# advisor_booking/api/dependencies/__init__.py
from .auth import get_current_admin
from .database import get_db, get_session_factory
from .services import (
    get_admin_service,
    get_advisor_service,
    get_auth_service,
    get_booking_service,
    get_booking_status_service,
    get_notifier,
    get_reminder_scheduler,
)

__all__ = [
    "get_admin_service",
    "get_advisor_service",
    "get_auth_service",
    "get_booking_service",
    "get_booking_status_service",
    "get_current_admin",
    "get_db",
    "get_notifier",
    "get_reminder_scheduler",
    "get_session_factory",
]
