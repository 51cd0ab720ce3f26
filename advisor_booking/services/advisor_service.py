# advisor_booking/services/advisor_service.py
"""
Advisor Service

Read-side operations for clients: the advisor directory, availability
within a date range, and a client's own bookings.
"""

from datetime import datetime
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..core.exceptions import AdvisorNotFoundException, ValidationException
from ..core.time_window import ensure_utc
from ..core.validators import normalize_email, require_positive_id
from ..models.advisor import Advisor
from ..models.booking import Booking
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def booking_summary(booking: Booking) -> Dict[str, Any]:
    """Flatten a booking loaded with its slot and advisor."""
    return {
        "id": booking.id,
        "slot_id": booking.slot_id,
        "advisor_id": booking.advisor_id,
        "advisor_name": booking.advisor.name,
        "advisor_timezone": booking.advisor.timezone,
        "client_name": booking.client_name,
        "client_email": booking.client_email,
        "status": booking.status,
        "start_utc": booking.slot.start_utc,
        "end_utc": booking.slot.end_utc,
        "created_at": booking.created_at,
        "updated_at": booking.updated_at,
    }


class AdvisorService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.advisor_repository = RepositoryFactory.create_advisor_repository(db)
        self.slot_repository = RepositoryFactory.create_slot_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("list_advisors")
    def list_advisors(self) -> List[Advisor]:
        return self.advisor_repository.list_ordered()

    @BaseService.measure_operation("get_availability")
    def get_availability(
        self, advisor_id: int, range_start: datetime, range_end: datetime
    ) -> Dict[str, Any]:
        """
        Free slots of one advisor lying entirely within ``[range_start, range_end]``.

        Raises:
            ValidationException: bad advisor id or an empty/inverted range
            AdvisorNotFoundException: unknown advisor
        """
        advisor_id = require_positive_id(advisor_id, "advisor_id")
        range_start, range_end = ensure_utc(range_start), ensure_utc(range_end)
        if range_start >= range_end:
            raise ValidationException(
                "'from' must be earlier than 'to'",
                details={"from": range_start.isoformat(), "to": range_end.isoformat()},
            )

        advisor = self.advisor_repository.get_by_id(advisor_id)
        if advisor is None:
            raise AdvisorNotFoundException(advisor_id)

        slots = self.slot_repository.find_free_in_range(advisor_id, range_start, range_end)
        return {
            **advisor.to_dict(),
            "available_slots": [
                {"id": slot.id, "start_utc": slot.start_utc, "end_utc": slot.end_utc}
                for slot in slots
            ],
        }

    @BaseService.measure_operation("get_client_bookings")
    def get_client_bookings(self, email: str) -> List[Dict[str, Any]]:
        normalized = normalize_email(email, field="email")
        return [booking_summary(b) for b in self.booking_repository.find_by_client_email(normalized)]
