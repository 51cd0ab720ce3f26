# advisor_booking/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each factory builds a service on the request's session. The notifier is
a process-wide singleton; tests replace it through ``dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ...services.admin_service import AdminService
from ...services.advisor_service import AdvisorService
from ...services.auth_service import AuthService
from ...services.booking_service import BookingService
from ...services.booking_status_service import BookingStatusService
from ...services.email import EmailService
from ...services.notifier import Notifier
from ...tasks.reminder_scheduler import ReminderScheduler
from .database import get_db


@lru_cache(maxsize=1)
def _email_service_singleton() -> EmailService:
    return EmailService()


def get_notifier() -> Notifier:
    return _email_service_singleton()


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_booking_status_service(db: Session = Depends(get_db)) -> BookingStatusService:
    return BookingStatusService(db)


def get_advisor_service(db: Session = Depends(get_db)) -> AdvisorService:
    return AdvisorService(db)


def get_admin_service(
    db: Session = Depends(get_db), notifier: Notifier = Depends(get_notifier)
) -> AdminService:
    return AdminService(db, notifier)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    return request.app.state.reminder_scheduler
