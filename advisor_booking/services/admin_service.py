# advisor_booking/services/admin_service.py
"""
Admin Service

Read and maintenance operations behind the admin panel. Status changes
and cancellations go through ``BookingStatusService``; this service only
adds listings, statistics, the email audit view and confirmation resends.
"""

from datetime import date
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import EMAIL_LOG_QUERY_LIMIT
from ..core.enums import BookingStatus, EmailStatus, EmailType, SlotStatus
from ..core.exceptions import BookingNotFoundException, ValidationException
from ..core.validators import parse_enum, require_positive_id
from ..repositories.factory import RepositoryFactory
from .advisor_service import booking_summary
from .base import BaseService
from .booking_status_service import BookingStatusService, StatusTransition
from .notification_service import NotificationService
from .notifier import Notifier

logger = logging.getLogger(__name__)


class AdminService(BaseService):
    def __init__(self, db: Session, notifier: Optional[Notifier] = None):
        super().__init__(db)
        self.notifier = notifier
        self.advisor_repository = RepositoryFactory.create_advisor_repository(db)
        self.slot_repository = RepositoryFactory.create_slot_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.email_log_repository = RepositoryFactory.create_email_log_repository(db)

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        *,
        advisor_id: Optional[int] = None,
        status: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        if advisor_id is not None:
            require_positive_id(advisor_id, "advisor_id")
        status_value = parse_enum(BookingStatus, status, "status").value if status else None
        if from_date and to_date and from_date > to_date:
            raise ValidationException(
                "from_date must not be after to_date",
                details={"from_date": from_date.isoformat(), "to_date": to_date.isoformat()},
            )
        bookings = self.booking_repository.list_filtered(
            advisor_id=advisor_id, status=status_value, from_date=from_date, to_date=to_date
        )
        return [booking_summary(b) for b in bookings]

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: int) -> Dict[str, Any]:
        booking_id = require_positive_id(booking_id, "booking_id")
        booking = self.booking_repository.get_with_details(booking_id)
        if booking is None:
            raise BookingNotFoundException(booking_id)
        detail = booking_summary(booking)
        detail["email_logs"] = [
            {
                "id": log.id,
                "type": log.type,
                "status": log.status,
                "attempts": log.attempts,
                "sent_at": log.sent_at,
                "error_message": log.error_message,
                "created_at": log.created_at,
            }
            for log in self.email_log_repository.list_for_booking(booking_id)
        ]
        return detail

    def delete_booking(self, booking_id: int) -> StatusTransition:
        """Cancel the booking and free its slot; rows are never physically deleted."""
        return BookingStatusService(self.db).cancel_booking(booking_id)

    @BaseService.measure_operation("get_stats")
    def get_stats(self) -> Dict[str, int]:
        bookings = self.booking_repository.count_by_status()
        slots = self.slot_repository.count_by_status()
        return {
            "total_bookings": sum(bookings.values()),
            "confirmed_bookings": bookings[BookingStatus.CONFIRMED.value],
            "cancelled_bookings": bookings[BookingStatus.CANCELLED.value],
            "completed_bookings": bookings[BookingStatus.COMPLETED.value],
            "total_advisors": self.advisor_repository.count(),
            "available_slots": slots[SlotStatus.FREE.value],
            "booked_slots": slots[SlotStatus.BOOKED.value],
            "blocked_slots": slots[SlotStatus.BLOCKED.value],
            "pending_emails": self.email_log_repository.count_bookings_pending(),
            "sent_emails": self.email_log_repository.count_with_status(EmailStatus.SENT),
            "failed_emails": self.email_log_repository.count_with_status(EmailStatus.FAILED),
        }

    @BaseService.measure_operation("list_email_logs")
    def list_email_logs(
        self,
        *,
        email_type: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = EMAIL_LOG_QUERY_LIMIT,
    ) -> List[Dict[str, Any]]:
        type_value = parse_enum(EmailType, email_type, "type").value if email_type else None
        status_value = parse_enum(EmailStatus, status, "status").value if status else None
        limit = max(1, min(limit, EMAIL_LOG_QUERY_LIMIT))
        logs = self.email_log_repository.list_recent(
            email_type=type_value, status=status_value, limit=limit
        )
        return [
            {
                "id": log.id,
                "booking_id": log.booking_id,
                "type": log.type,
                "status": log.status,
                "attempts": log.attempts,
                "sent_at": log.sent_at,
                "error_message": log.error_message,
                "created_at": log.created_at,
                "client_name": log.booking.client_name,
                "client_email": log.booking.client_email,
                "advisor_name": log.booking.advisor.name,
            }
            for log in logs
        ]

    @BaseService.measure_operation("resend_confirmation")
    def resend_confirmation(self, booking_id: int) -> bool:
        """
        Queue and immediately attempt another confirmation email.

        Returns whether delivery succeeded; the pending row is kept either way.
        """
        booking_id = require_positive_id(booking_id, "booking_id")
        if self.notifier is None:
            raise ValueError("AdminService needs a notifier to resend emails")

        with self.transaction():
            if self.booking_repository.get_by_id(booking_id) is None:
                raise BookingNotFoundException(booking_id)
            self.email_log_repository.record(
                booking_id, EmailType.CONFIRMATION, EmailStatus.PENDING
            )

        self.log_operation("confirmation_resend_requested", booking_id=booking_id)
        return NotificationService(self.db, self.notifier).send_confirmation(booking_id)
